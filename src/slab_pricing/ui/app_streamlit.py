"""
Streamlit UI for slab pricing.

Features:
- Price calculator with quantity stepper and extended-range indicator
- Slab offers and a preview table for common quantities
- Pricing settings editor that validates slabs before saving
"""
import streamlit as st
import pandas as pd
import sys
from pathlib import Path

# Add src to path for imports
src_path = Path(__file__).parent.parent.parent
if str(src_path) not in sys.path:
    sys.path.insert(0, str(src_path))

from slab_pricing.config.settings import get_settings
from slab_pricing.engine import PricingSlab, DiscountType, validate_slabs, step_quantity
from slab_pricing.engine.slab_tools import describe_slab, next_slab_template, quote_table
from slab_pricing.exceptions import SettingsValidationFailed
from slab_pricing.logging_setup import configure_logging, is_configured
from slab_pricing.services.inventory_service import InventoryService


st.set_page_config(
    page_title="Slab Pricing",
    layout="wide",
    initial_sidebar_state="expanded"
)


@st.cache_resource
def get_settings_cached():
    """Get cached settings."""
    settings = get_settings()
    if not is_configured():
        configure_logging(settings.log_level)
    return settings


@st.cache_resource
def get_service():
    """Get cached inventory service."""
    return InventoryService(get_settings_cached().inventory_csv)


settings = get_settings_cached()
service = get_service()
currency = settings.currency_symbol

items = service.list_items()
if not items:
    st.info("No inventory records found.")
    st.caption(f"Expected records at {settings.inventory_csv}")
    st.stop()


# ============================================================================
# SIDEBAR: Product selection
# ============================================================================
with st.sidebar:
    st.header("📦 Product")
    labels = {f"{it.item_id} | {it.product_name}": it.item_id for it in items}
    selected_label = st.selectbox("Inventory Item", options=list(labels.keys()))
    item = service.get_item(labels[selected_label])

    with st.container(border=True):
        st.markdown(f"**Selling Price:** {currency}{item.selling_price:.2f}")
        if item.is_price_overridden:
            st.caption(f"~~{currency}{item.default_price:.2f}~~ catalog price overridden")
        if item.enable_quantity_pricing:
            st.success(f"🔧 **{len(item.pricing_slabs)} Slabs**")
        else:
            st.warning("Quantity pricing off")


st.title("Slab Pricing")
tab1, tab2 = st.tabs(["🧮 Price Calculator", "⚙️ Pricing Settings"])


# ============================================================================
# TAB 1: PRICE CALCULATOR
# ============================================================================
with tab1:
    if 'quantity' not in st.session_state:
        st.session_state.quantity = 1

    c1, c2, c3 = st.columns([1, 2, 1])
    with c1:
        if st.button("➖", disabled=st.session_state.quantity <= 1, use_container_width=True):
            st.session_state.quantity = step_quantity(st.session_state.quantity, -1)
            st.rerun()
    with c2:
        st.session_state.quantity = st.number_input(
            "Quantity", min_value=1, step=1, value=st.session_state.quantity, label_visibility="collapsed"
        )
    with c3:
        if st.button("➕", use_container_width=True):
            st.session_state.quantity = step_quantity(st.session_state.quantity, 1)
            st.rerun()

    quote = service.quote(item.item_id, st.session_state.quantity)

    m1, m2, m3 = st.columns(3)
    m1.metric("Unit Price", f"{currency}{quote.final_unit_price:,.2f}")
    m2.metric("Total", f"{currency}{quote.final_total:,.2f}")
    m3.metric("Savings", f"{currency}{quote.savings:,.2f}", f"{quote.savings_percentage:.1f}% off" if quote.has_discount else None)

    if quote.applied_slab:
        st.caption(f"**Applied:** {describe_slab(quote.applied_slab, currency)}")
        if quote.is_extended_range:
            st.info("Extended range: highest slab discount applied beyond its upper bound")

    for warning in quote.warnings:
        st.warning(warning)

    if item.enable_quantity_pricing and item.pricing_slabs:
        st.markdown("##### Quantity Offers")
        for slab in sorted((s for s in item.pricing_slabs if s.is_active), key=lambda s: s.min_quantity):
            st.markdown(f"• {describe_slab(slab, currency)}")

        st.markdown("##### Preview")
        st.dataframe(
            quote_table(item.selling_price, item.pricing_slabs, settings.preview_quantities, currency_symbol=currency),
            use_container_width=True,
            hide_index=True
        )
    elif not item.enable_quantity_pricing:
        st.caption("Quantity-based pricing is not enabled for this product")

    with st.expander("🔍 Resolution Details"):
        st.code(quote.get_trace_text())


# ============================================================================
# TAB 2: PRICING SETTINGS
# ============================================================================
with tab2:
    s1, s2, s3 = st.columns(3)
    selling_price = s1.number_input("Selling Price", min_value=0.0, value=float(item.selling_price), step=1.0)
    min_stock = s2.number_input("Min Stock Level", value=int(item.min_stock_level), step=1)
    max_stock = s3.number_input("Max Stock Level", value=int(item.max_stock_level), step=1)
    enable_qp = st.toggle("Quantity-based pricing", value=item.enable_quantity_pricing)

    slab_df = pd.DataFrame(
        [s.to_dict() for s in item.pricing_slabs] or [next_slab_template([], settings.new_slab_span).to_dict()],
        columns=['minQuantity', 'maxQuantity', 'discountType', 'discountValue', 'isActive']
    )
    edited = st.data_editor(
        slab_df,
        use_container_width=True,
        num_rows="dynamic",
        disabled=not enable_qp,
        column_config={
            "minQuantity": st.column_config.NumberColumn("Min Qty", step=1),
            "maxQuantity": st.column_config.NumberColumn("Max Qty", step=1),
            "discountType": st.column_config.SelectboxColumn(
                "Type", options=[t.value for t in DiscountType]
            ),
            "discountValue": st.column_config.NumberColumn("Discount"),
            "isActive": st.column_config.CheckboxColumn("Active"),
        },
        hide_index=True,
        key=f"slab_editor_{item.item_id}"
    )
    slabs = [PricingSlab.from_dict(row) for row in edited.to_dict(orient="records")]

    if enable_qp:
        check = validate_slabs(slabs)
        for error in check.errors:
            st.error(error.message)

    if st.button("💾 Save All Settings", type="primary"):
        try:
            service.update_settings(item.item_id, {
                'selling_price': selling_price,
                'min_stock_level': min_stock,
                'max_stock_level': max_stock,
                'enable_quantity_pricing': enable_qp,
                'pricing_slabs': slabs,
            })
            st.toast("Product pricing and settings updated")
            st.rerun()
        except SettingsValidationFailed as e:
            for message in e.errors:
                st.error(message)
