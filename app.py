"""
Product Allocation Interface - Main Entry Point
Allocate a shared stock to customer orders under credit and stock limits
"""
import streamlit as st
import logging

from utils.config import config
from utils.product_allocation import (
    AllocationSession,
    build_customer_exposure_frame,
    build_orders_frame,
    build_summary,
)
from utils.product_allocation.formatters import (
    format_currency,
    format_number,
    format_percentage,
    format_quantity,
    format_stock_status,
    format_violation,
)
from utils.product_allocation.tooltips import get_tooltip

# Configure logging
logging.basicConfig(
    level=config.get_log_level(),
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)

# Page config
st.set_page_config(
    page_title="Product Allocation",
    page_icon="📦",
    layout="wide",
    initial_sidebar_state="collapsed"
)

CURRENCY = config.get_app_setting('CURRENCY_SYMBOL', '฿')
UOM = config.get_app_setting('QUANTITY_UOM', 'Unit')

# ==================== CUSTOM STYLES ====================

st.markdown("""
<style>
    /* Stats card */
    .stat-card {
        background: #f8fafc;
        border-radius: 8px;
        padding: 15px;
        text-align: center;
        border: 1px solid #e2e8f0;
    }
    .stat-value {
        font-size: 1.8rem;
        font-weight: 700;
    }
    .stat-value.total { color: #1f2937; }
    .stat-value.allocated { color: #16a34a; }
    .stat-value.remaining { color: #2563eb; }
    .stat-label {
        font-size: 0.85rem;
        color: #64748b;
    }

    /* Order id badge */
    .order-badge {
        display: inline-block;
        padding: 2px 10px;
        border-radius: 9999px;
        font-size: 0.75rem;
        font-weight: 500;
        background: #dbeafe;
        color: #1e40af;
    }
</style>
""", unsafe_allow_html=True)


# ==================== SESSION STATE ====================

def get_session() -> AllocationSession:
    """One allocation session per browser session"""
    if 'allocation_session' not in st.session_state:
        st.session_state.allocation_session = AllocationSession.from_app_config(config)
        logger.info("New allocation session started")
    return st.session_state.allocation_session


# ==================== CALLBACKS ====================

def on_auto_assign():
    get_session().run_auto_assignment()


def on_reset():
    get_session().reset_allocations()


def on_save():
    ack = get_session().save()
    st.session_state.last_save_message = ack.message


def on_add_order():
    get_session().add_order()


def on_step(order_id: str, delta: int):
    get_session().step_allocation(order_id, delta)


def on_use_suggestion(order_id: str):
    get_session().use_suggestion(order_id)


def on_qty_input(order_id: str, widget_key: str):
    get_session().update_allocation(order_id, st.session_state.get(widget_key, 0))


# ==================== HEADER ====================

def show_header(session: AllocationSession):
    """Title, version and stock indicator"""
    state = session.state

    col1, col2 = st.columns([4, 2])
    with col1:
        st.title("📦 Product Allocation Interface")
    with col2:
        st.caption(
            f"Version: {session.version_key} | "
            f"{format_stock_status(state.remaining_stock, state.total_stock)}"
        )

    btn1, btn2, btn3, btn4, _ = st.columns([1, 1, 1, 1, 4])
    with btn1:
        st.button("🔄 Auto-Assign", type="primary", on_click=on_auto_assign,
                  help=get_tooltip('action', 'auto_assign'), use_container_width=True)
    with btn2:
        st.button("↩️ Reset", on_click=on_reset,
                  help=get_tooltip('action', 'reset'), use_container_width=True)
    with btn3:
        st.button("💾 Save", on_click=on_save,
                  help=get_tooltip('action', 'save'), use_container_width=True)
    with btn4:
        st.button("➕ Add Order", on_click=on_add_order,
                  help=get_tooltip('action', 'add_order'), use_container_width=True)

    message = st.session_state.pop('last_save_message', None)
    if message:
        st.success(f"✅ {message}")


# ==================== WARNINGS ====================

def show_warnings(session: AllocationSession):
    """Violation messages from the last operation"""
    errors = session.errors
    if not errors:
        return

    st.error(
        "⚠️ **Allocation Warnings**\n\n" + "\n".join(format_violation(e) for e in errors)
    )


# ==================== ORDERS TABLE ====================

def show_orders_table(session: AllocationSession):
    """Order rows with allocation controls"""
    st.markdown("### Order Allocations")

    orders_df = build_orders_frame(session.state)
    if orders_df.empty:
        st.info("No orders yet. Use ➕ Add Order to create one.")
        return

    widths = [1.2, 1.3, 1.6, 1.2, 1, 0.9, 0.9, 2.4, 1.2, 1.2]
    headers = [
        "Order ID", "Customer", "Product", "Credit Remaining", "Price/Unit",
        "Requested", "Suggestion", "Allocated", "Total", "Actions"
    ]
    header_cols = st.columns(widths)
    for col, title in zip(header_cols, headers):
        col.markdown(f"**{title}**")

    version = session.version_key
    for row in orders_df.itertuples(index=False):
        cols = st.columns(widths)

        cols[0].markdown(f'<span class="order-badge">{row.order_id}</span>', unsafe_allow_html=True)
        cols[1].write(row.customer_name or "-")
        cols[2].write(row.product_name or "-")
        cols[3].write(format_currency(row.credit_remaining, CURRENCY))
        cols[4].write(format_currency(row.price_per_unit, CURRENCY))
        cols[5].write(format_quantity(row.requested_qty, UOM))
        cols[6].caption(format_quantity(row.suggestion, UOM))

        with cols[7]:
            minus, qty, plus = st.columns([1, 2, 1])
            minus.button("➖", key=f"minus_{row.order_id}_{version}",
                         on_click=on_step, args=(row.order_id, -1),
                         disabled=bool(row.allocated_qty <= 0))
            widget_key = f"qty_{row.order_id}_{version}"
            qty.number_input(
                "Allocated",
                min_value=0,
                value=int(row.allocated_qty),
                step=1,
                key=widget_key,
                on_change=on_qty_input,
                args=(row.order_id, widget_key),
                label_visibility="collapsed",
                help=get_tooltip('column', 'allocated'),
            )
            plus.button("➕", key=f"plus_{row.order_id}_{version}",
                        on_click=on_step, args=(row.order_id, 1))

        cols[8].markdown(f"**{format_currency(row.total, CURRENCY)}**")
        cols[9].button("Use Suggestion", key=f"suggest_{row.order_id}_{version}",
                       on_click=on_use_suggestion, args=(row.order_id,))


# ==================== SUMMARY ====================

def show_summary_cards(session: AllocationSession):
    """Total / allocated / remaining stock"""
    summary = build_summary(session.state)

    st.markdown("")
    card1, card2, card3 = st.columns(3)

    cards = [
        (card1, "total", summary['total_stock'], "Total Stock"),
        (card2, "allocated", summary['allocated'], "Allocated"),
        (card3, "remaining", summary['remaining'], "Remaining"),
    ]
    for column, css, value, label in cards:
        with column:
            st.markdown(f"""
            <div class="stat-card">
                <div class="stat-label">{label}</div>
                <div class="stat-value {css}">{format_number(value)} {UOM}s</div>
            </div>
            """, unsafe_allow_html=True)

    st.caption(
        f"Allocated value: {format_currency(summary['allocated_value'], CURRENCY)} | "
        f"Coverage of requested: {format_percentage(summary['coverage_percent'])}"
    )


def show_customer_exposure(session: AllocationSession):
    """Allocated value per customer against credit"""
    exposure = build_customer_exposure_frame(session.state)
    if exposure.empty:
        return

    with st.expander("💳 Customer credit exposure", expanded=bool(exposure['over_credit'].any())):
        st.dataframe(
            exposure,
            hide_index=True,
            use_container_width=True,
            column_config={
                'customer_id': 'Customer ID',
                'customer_name': 'Customer',
                'order_count': 'Orders',
                'allocated_qty': st.column_config.NumberColumn('Allocated', format="%d"),
                'allocated_value': st.column_config.NumberColumn('Allocated Value', format="%.2f"),
                'credit_remaining': st.column_config.NumberColumn('Credit Remaining', format="%.2f"),
                'credit_used_percent': st.column_config.NumberColumn('Credit Used %', format="%.1f%%"),
                'over_credit': 'Over Credit',
            }
        )


# ==================== MAIN ====================

def main():
    """Main entry point"""
    session = get_session()

    try:
        show_header(session)
        show_warnings(session)
        show_orders_table(session)
        show_summary_cards(session)
        show_customer_exposure(session)
    except Exception as e:
        logger.error(f"Error rendering allocation page: {e}", exc_info=True)
        st.error(f"❌ Error displaying allocations: {str(e)}")

    st.markdown("---")
    st.caption(
        f"v1.0.0 | "
        f"{'☁️ Cloud' if config.is_cloud else '💻 Local'}"
    )


if __name__ == "__main__":
    main()
