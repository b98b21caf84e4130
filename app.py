import streamlit as st
import pandas as pd
import plotly.express as px
from strategy_model.config import (
    DEMO_WALLET_ADDRESS, INVESTMENT_GOALS, TIME_HORIZONS, MARKET_CONDITIONS,
)
from strategy_model.engine import (
    MarketTrend, list_strategies, get_strategy_by_id, get_recommended_strategy,
    calculate_expected_returns, optimize_portfolio, allocation_frame, expected_return_table,
)
from strategy_model.portfolio import (
    portfolio_overview, portfolio_summary, transaction_history, holdings_as_allocation,
    rebalance_actions, short_address,
)

st.set_page_config(page_title="Apptronik AI", layout="wide")

st.title("Apptronik AI: Crypto Strategy Dashboard")

# --- Wallet ---
if "connected" not in st.session_state:
    st.session_state["connected"] = False

st.sidebar.header("Wallet")
if st.session_state["connected"]:
    st.sidebar.success(f"Connected: {short_address(DEMO_WALLET_ADDRESS)}")
    if st.sidebar.button("Disconnect"):
        st.session_state["connected"] = False
        st.rerun()
else:
    if st.sidebar.button("Connect Wallet"):
        st.session_state["connected"] = True
        st.rerun()

# --- Sidebar controls ---
st.sidebar.header("Strategy Settings")
risk = st.sidebar.slider("Risk tolerance", 0, 100, 50, step=1)
goal = st.sidebar.selectbox("Investment goal", INVESTMENT_GOALS)
horizon = st.sidebar.selectbox("Time horizon", TIME_HORIZONS, index=1)
market = st.sidebar.selectbox("Market condition", MARKET_CONDITIONS, index=1)
live_prices = st.sidebar.checkbox("Live prices (CoinGecko)", False)

recommended_id = get_recommended_strategy(risk, goal, horizon)
strategy_ids = [s.id for s in list_strategies()]
selected_id = st.sidebar.selectbox(
    "Strategy", strategy_ids, index=strategy_ids.index(recommended_id),
    help="Defaults to the recommendation for the chosen risk tolerance",
)
strategy = get_strategy_by_id(selected_id)

if not st.session_state["connected"]:
    st.subheader("Connect Your Wallet")
    st.write("Connect your wallet to start managing your crypto assets with the AI strategy engine.")
    st.stop()

# --- Portfolio overview ---
summary = portfolio_summary()
c1, c2, c3 = st.columns(3)
c1.metric("Total Portfolio Value", f"${summary['value']:,.2f}", f"{summary['pct_change']:+.1f}%")
c2.metric("24h High", f"${summary['high_24h']:,.2f}")
c3.metric("24h Low", f"${summary['low_24h']:,.2f}")

holdings = portfolio_overview(secrets=st.secrets, live_prices=live_prices)
st.subheader("Wallet Holdings")
st.dataframe(
    holdings[["Symbol", "Asset", "Balance", "Price", "Value_$", "Alloc_%"]],
    use_container_width=True,
    column_config={
        "Balance": st.column_config.NumberColumn("Balance", format="%.4f"),
        "Price": st.column_config.NumberColumn("Price", format="$%.2f"),
        "Value_$": st.column_config.NumberColumn("Value", format="$%.0f"),
        "Alloc_%": st.column_config.NumberColumn("Alloc %", format="%.2f%%"),
    }
)

st.markdown("---")

# --- Strategy ---
st.header(f"{strategy.name} Strategy")
if selected_id == recommended_id:
    st.caption(f"Recommended for risk tolerance {risk}.")
else:
    st.caption(f"Recommended for risk tolerance {risk}: **{recommended_id}**.")
st.write(strategy.description)

m1, m2, m3 = st.columns(3)
m1.metric("Risk Level", f"{strategy.risk_level}/100")
m2.metric(f"Expected Return ({market})", f"{calculate_expected_returns(strategy, market):g}%")
m3.metric("Rebalancing", strategy.rebalancing_frequency.value.title())

base_df = allocation_frame(strategy.allocation)
left, right = st.columns(2)
with left:
    st.dataframe(
        base_df, use_container_width=True,
        column_config={"Alloc_%": st.column_config.NumberColumn("Alloc %", format="%.0f%%")},
    )
    st.dataframe(expected_return_table(strategy), use_container_width=True)
with right:
    fig = px.pie(base_df, names="Symbol", values="Alloc_%", title="Target Allocation", hole=0.4)
    st.plotly_chart(fig, use_container_width=True)

# --- Optimization ---
st.markdown("---")
st.header("Market-Trend Optimization")
st.caption("Sentiment and momentum per asset, roughly -1 to 1. Positive trends draw weight from the first stablecoin above 5%.")

trend_input = pd.DataFrame({
    "Symbol": base_df["Symbol"],
    "Sentiment": 0.0,
    "Momentum": 0.0,
})
edited = st.data_editor(trend_input, use_container_width=True, disabled=["Symbol"], key=f"trends_{selected_id}").fillna(0.0)
trends = {
    row.Symbol: MarketTrend(sentiment=float(row.Sentiment), momentum=float(row.Momentum))
    for row in edited.itertuples(index=False)
    if row.Sentiment or row.Momentum
}

optimized = optimize_portfolio(holdings_as_allocation(holdings), strategy, trends)
opt_df = base_df[["Symbol", "Asset"]].copy()
opt_df["Target_%"] = base_df["Alloc_%"]
opt_df["Optimized_%"] = allocation_frame(optimized)["Alloc_%"]
opt_df["Change_%"] = opt_df["Optimized_%"] - opt_df["Target_%"]

o1, o2 = st.columns(2)
with o1:
    st.dataframe(
        opt_df, use_container_width=True,
        column_config={
            "Target_%": st.column_config.NumberColumn("Target %", format="%.2f%%"),
            "Optimized_%": st.column_config.NumberColumn("Optimized %", format="%.2f%%"),
            "Change_%": st.column_config.NumberColumn("Change", format="%+.2f"),
        }
    )
with o2:
    fig = px.bar(opt_df, x="Symbol", y=["Target_%", "Optimized_%"], barmode="group", title="Target vs Optimized")
    st.plotly_chart(fig, use_container_width=True)

st.subheader("Recommended Actions")
actions = rebalance_actions(strategy.allocation, optimized, threshold=0.5)
if actions:
    for i, action in enumerate(actions, 1):
        st.write(f"{i}. {action}")
else:
    st.write("No action: optimized allocation matches the target.")

# --- Transactions ---
st.markdown("---")
st.header("Recent Transactions")
history = transaction_history()
st.dataframe(
    history, use_container_width=True,
    column_config={"Value_$": st.column_config.NumberColumn("Value", format="$%.2f")},
)

# --- Downloads ---
st.subheader("Download")
st.download_button(
    "Download optimized allocation (CSV)",
    opt_df.to_csv(index=False),
    file_name=f"allocation_{selected_id}.csv",
    mime="text/csv"
)
st.download_button(
    "Download transactions (CSV)",
    history.to_csv(index=False),
    file_name="transactions.csv",
    mime="text/csv"
)
