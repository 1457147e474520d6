"""
Streamlit "Scan Receipt" page.

Drives a ReceiptScanSession from a camera or gallery image and hands the
result to a prefilled transaction form. No extraction logic lives here.
"""

import asyncio
import os
import sys
from decimal import Decimal, InvalidOperation

import streamlit as st
from dotenv import load_dotenv

# Add project root to path
sys.path.append(os.path.join(os.path.dirname(__file__), '..', '..'))

from expense_scan.models import ExpenseCategory, ImageSource, ReceiptImage, TransactionDraft
from expense_scan.ocr import OcrSpaceClient
from expense_scan.pipeline import ReceiptScanSession
from expense_scan.utils.logging_config import logger, set_log_level

load_dotenv()
set_log_level(os.getenv("LOG_LEVEL", "INFO"))

CATEGORY_OPTIONS = [c.value for c in ExpenseCategory]


def get_scan_session():
    """Create the scan session for this browser session, or None without an API key."""
    try:
        return ReceiptScanSession(OcrSpaceClient())
    except ValueError as e:
        st.session_state.init_error = str(e)
        return None


def init_session_state():
    """Initialize Streamlit session state."""
    if 'scan_session' not in st.session_state:
        st.session_state.scan_session = get_scan_session()
    if 'pending_outcome' not in st.session_state:
        st.session_state.pending_outcome = None
    if 'draft' not in st.session_state:
        st.session_state.draft = None
    if 'transactions' not in st.session_state:
        st.session_state.transactions = []


def setup_page_config():
    """Configure Streamlit page settings."""
    st.set_page_config(
        page_title="Scan Receipt",
        page_icon="🧾",
        layout="centered",
    )


def to_receipt_image(upload, source: ImageSource) -> ReceiptImage:
    """Copy an uploaded file into a ReceiptImage so the pipeline holds bytes only."""
    return ReceiptImage(
        data=upload.getvalue(),
        content_type=upload.type or "image/jpeg",
        filename=upload.name or "receipt.jpg",
        source=source,
    )


def process_image(image: ReceiptImage):
    """Run one scan and park the outcome for rendering."""
    session = st.session_state.scan_session
    with st.spinner("Processing receipt... Extracting expense details"):
        outcome = asyncio.run(session.scan(image))
    st.session_state.pending_outcome = outcome
    st.session_state.draft = None


def render_capture_options():
    """Take Photo / Choose from Gallery."""
    camera_tab, gallery_tab = st.tabs(["📷 Take Photo", "🖼️ Choose from Gallery"])

    with camera_tab:
        photo = st.camera_input("Capture receipt with camera")
        if photo is not None and st.button("Process photo", type="primary"):
            process_image(to_receipt_image(photo, ImageSource.CAMERA))

    with gallery_tab:
        picked = st.file_uploader("Select existing receipt photo", type=["jpg", "jpeg", "png"])
        if picked is not None and st.button("Process image", type="primary"):
            process_image(to_receipt_image(picked, ImageSource.GALLERY))


def render_outcome():
    """Offer the choices each outcome allows."""
    outcome = st.session_state.pending_outcome
    if outcome is None:
        return

    if outcome.kind == "resolved":
        st.session_state.draft = outcome.to_draft()
        st.session_state.pending_outcome = None
        st.success("Receipt processed!")

    elif outcome.kind == "needs_manual_amount":
        st.warning("Could not detect amount automatically. Would you like to enter details manually?")
        retry_col, manual_col = st.columns(2)
        if retry_col.button("Try Again"):
            st.session_state.pending_outcome = None
            st.rerun()
        if manual_col.button("Enter Manually"):
            st.session_state.draft = outcome.accept_manual()
            st.session_state.pending_outcome = None
            st.rerun()

    else:
        st.error("Failed to process receipt. Please enter details manually.")
        if st.button("OK"):
            st.session_state.draft = outcome.manual_fallback()
            st.session_state.pending_outcome = None
            st.rerun()


def render_transaction_form(draft: TransactionDraft):
    """Prefilled expense form; submissions stay in session state."""
    st.markdown("### ✍️ New Expense")
    with st.form("transaction_form"):
        title = st.text_input("Title", value=draft.title)
        amount = st.text_input("Amount", value=draft.amount, placeholder="Enter amount")
        category = st.selectbox(
            "Category",
            CATEGORY_OPTIONS,
            index=CATEGORY_OPTIONS.index(draft.category) if draft.category in CATEGORY_OPTIONS else len(CATEGORY_OPTIONS) - 1,
        )
        submitted = st.form_submit_button("Save Expense")

    if submitted:
        try:
            value = Decimal(amount.replace(',', '').strip())
        except InvalidOperation:
            st.error("Please enter a valid amount.")
            return
        st.session_state.transactions.append({"title": title, "amount": str(value), "category": category})
        st.session_state.draft = None
        logger.info(f"Expense saved from receipt: {title} {value} ({category})")
        st.success("Expense saved!")


def render_tips():
    st.markdown("""
    **Tips for better scanning:**
    - Ensure good lighting
    - Keep receipt flat and straight
    - Include the total amount in the photo
    """)


def main():
    """Main application entry point."""
    setup_page_config()
    init_session_state()
    st.title("🧾 Scan Receipt")

    if st.session_state.scan_session is None:
        st.error(f"Receipt scanning unavailable: {st.session_state.get('init_error', 'not configured')}")
    elif st.session_state.draft is None and st.session_state.pending_outcome is None:
        render_capture_options()

    render_outcome()

    if st.session_state.draft is not None:
        render_transaction_form(st.session_state.draft)

    if st.session_state.transactions:
        st.markdown("---")
        st.markdown("### 📒 Saved Expenses")
        st.table(st.session_state.transactions)

    st.markdown("---")
    render_tips()


if __name__ == "__main__":
    main()
