import sys
import os
import asyncio
from dotenv import load_dotenv

# Add project root to path
sys.path.append(os.path.join(os.path.dirname(__file__), '..'))

from expense_scan.models import ImageSource, ReceiptImage
from expense_scan.ocr import OcrSpaceClient
from expense_scan.pipeline import ReceiptScanSession

def scan_file(path):
    load_dotenv()
    session = ReceiptScanSession(OcrSpaceClient())
    
    with open(path, 'rb') as f:
        image = ReceiptImage(data=f.read(), filename=os.path.basename(path), source=ImageSource.GALLERY)
    
    print(f"Scanning: '{path}'")
    outcome = asyncio.run(session.scan(image))
    
    print(f"Outcome: {outcome.kind}")
    if outcome.kind == "resolved":
        print(f" Draft: {outcome.to_draft().model_dump()}")
    elif outcome.kind == "needs_manual_amount":
        print(f" No amount found. Manual draft: {outcome.accept_manual().model_dump()}")
    else:
        print(f" {outcome.error_type}: {outcome.reason}")
        print(f" Manual draft: {outcome.manual_fallback().model_dump()}")

if __name__ == "__main__":
    if len(sys.argv) != 2:
        print("Usage: python scripts/scan_file.py <receipt.jpg>")
        sys.exit(1)
    scan_file(sys.argv[1])
