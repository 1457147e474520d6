"""
Simple launcher for the receipt scanner.
This runs the Streamlit page which drives the scan pipeline.
"""

import os
import sys
import subprocess

def main():
    print(" RECEIPT SCANNER")
    print("=" * 60)
    print()
    print(" The page will:")
    print("  Take a photo or pick a receipt image")
    print("  Recognize its text with OCR.space")
    print("  Prefill an expense with title, amount and category")
    print()
    print(" Starting Streamlit UI...")
    print(" Will open at: http://localhost:8501")
    print(" Press Ctrl+C to stop")
    print("=" * 60)
    print()
    
    streamlit_script = os.path.join(os.path.dirname(__file__), "expense_scan", "ui", "streamlit_app.py")
    
    try:
        subprocess.run([
            sys.executable, "-m", "streamlit", "run", 
            streamlit_script
        ], check=True)
    except KeyboardInterrupt:
        print("\n\n Shutting down gracefully...")
    except FileNotFoundError:
        print("\n Streamlit not found. Install it with: pip install -e .")
    except subprocess.CalledProcessError as e:
        print(f"\n Error: {e}")
        print("\n Try running directly:")
        print(f"   streamlit run {streamlit_script}")

if __name__ == "__main__":
    main()
