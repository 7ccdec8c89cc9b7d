"""
Streamlit UI for the checkout terminal.

Features:
- Scan / remove items by SKU
- Live itemized receipt with bundle breakdown
- Finalize the cart
- Rules table for the loaded pricing file
"""
import streamlit as st
import pandas as pd
import sys
from pathlib import Path
from datetime import datetime

# Add src to path for imports
src_path = Path(__file__).parent.parent.parent
if str(src_path) not in sys.path:
    sys.path.insert(0, str(src_path))

from checkout_tool.engine import Checkout, CheckoutError
from checkout_tool.config.settings import get_settings
from checkout_tool.services.rules_service import RulesService
from checkout_tool.utils.logger import setup_logger


st.set_page_config(
    page_title="Checkout Terminal",
    layout="wide",
    initial_sidebar_state="expanded"
)


@st.cache_resource
def get_settings_cached():
    """Get cached settings."""
    settings = get_settings()
    setup_logger(settings.log_level, settings.log_dir)
    return settings


def new_checkout(rules_path: str) -> Checkout:
    co = Checkout(rules_path, strict_refresh=settings.strict_refresh)
    st.session_state.checkout = co
    st.session_state.rules_path = rules_path
    return co


settings = get_settings_cached()

# ============================================================================
# SIDEBAR: Rule source
# ============================================================================
with st.sidebar:
    st.header("Pricing Rules")
    rules_path = st.text_input("Rules file", value=st.session_state.get("rules_path", str(settings.rules_path)))

    try:
        if "checkout" not in st.session_state or st.session_state.rules_path != rules_path:
            new_checkout(rules_path)
    except CheckoutError as e:
        st.error(f"Error loading rules: {e}")
        st.stop()

    co: Checkout = st.session_state.checkout
    st.success(f"**{len(co.rules)} Rules Loaded**")
    st.caption(f"Loaded at {co.rules.loaded_at.strftime('%H:%M:%S')}")

    if st.button("New Cart", use_container_width=True):
        new_checkout(rules_path)
        st.rerun()


# ============================================================================
# MAIN CONTENT
# ============================================================================
st.title("Checkout Terminal")
st.caption(f"v1.0 | {datetime.now().strftime('%Y-%m-%d')}")

tab1, tab2 = st.tabs(["Cart", "Rules"])

with tab1:
    col1, col2 = st.columns([1.2, 1.8], gap="large")

    with col1:
        st.subheader("Scan Items")
        with st.container(border=True):
            sku = st.selectbox("SKU", options=co.rules.skus, disabled=co.closed)
            c1, c2 = st.columns(2)
            with c1:
                if st.button("Scan", type="primary", use_container_width=True, disabled=co.closed):
                    try:
                        co.scan(sku)
                        st.rerun()
                    except CheckoutError as e:
                        st.error(str(e))
            with c2:
                if st.button("Remove", use_container_width=True, disabled=co.closed):
                    try:
                        co.remove(sku)
                        st.rerun()
                    except CheckoutError as e:
                        st.error(str(e))

    with col2:
        st.subheader("Receipt")
        receipt = co.receipt()

        m1, m2 = st.columns(2)
        m1.metric("Total", f"{receipt.total:,}")
        m2.metric("Items", receipt.item_count)

        for warning in receipt.warnings:
            st.warning(warning)

        if receipt.lines:
            lines_df = pd.DataFrame([{
                'SKU': line.sku,
                'Qty': line.quantity,
                'Unit Price': line.unit_price,
                'Bundles': line.bundles,
                'Ext Price': line.extended_price,
            } for line in receipt.lines])
            st.dataframe(lines_df, hide_index=True, use_container_width=True)

            with st.expander("Pricing Details"):
                for line in receipt.lines:
                    st.caption(f"**{line.sku}**")
                    st.text(line.get_trace_text())
        else:
            st.info("Cart is empty")

        if co.closed:
            st.success(f"Checked out. Final total: {receipt.total:,}")
        elif st.button("Checkout", type="primary", disabled=not receipt.lines):
            co.finalize()
            st.rerun()

with tab2:
    service = RulesService(co.store)
    stats = service.get_stats()

    s1, s2, s3 = st.columns(3)
    s1.metric("Rules", stats['total'])
    s2.metric("With Special", stats['with_special'])
    s3.metric("Reloads", stats['refresh_count'])

    if stats['last_error']:
        st.error(f"Last reload failed: {stats['last_error']}")

    st.dataframe(service.rules_frame(), hide_index=True, use_container_width=True)
