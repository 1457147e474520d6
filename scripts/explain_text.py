import sys
import os

# Add project root to path
sys.path.append(os.path.join(os.path.dirname(__file__), '..'))

from expense_scan.parsers import Categorizer, FieldExtractor

def explain(path):
    """Shows what the extractor makes of already recognized text, no OCR call."""
    with open(path, 'r', encoding='utf-8') as f:
        text = f.read()
    
    fields = FieldExtractor().extract_fields(text)
    rule = Categorizer().matching_rule(text)
    
    print(f"Title:    {fields.title!r}")
    print(f"Amount:   {fields.amount if fields.amount is not None else '(none, manual entry)'}")
    if rule:
        print(f"Category: {rule[0].value} (keyword '{rule[1]}')")
    else:
        print("Category: Others (no keyword matched)")

if __name__ == "__main__":
    if len(sys.argv) != 2:
        print("Usage: python scripts/explain_text.py <ocr_text.txt>")
        sys.exit(1)
    explain(sys.argv[1])
