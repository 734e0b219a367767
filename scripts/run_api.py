#!/usr/bin/env python
"""
Run the catalog pricing API with uvicorn.

Usage:
    python scripts/run_api.py [--port 8000] [--data-dir path/to/csvs]
"""
import argparse
import os
import sys
from pathlib import Path

import uvicorn


def main():
    parser = argparse.ArgumentParser(description="Catalog pricing API")
    parser.add_argument("--host", default="0.0.0.0")
    parser.add_argument("--port", type=int, default=8000)
    parser.add_argument("--data-dir", help="Directory with the store CSV files")
    parser.add_argument("--reload", action="store_true")
    args = parser.parse_args()

    project_root = Path(__file__).parent.parent
    src_path = str(project_root / "src")
    if src_path not in sys.path:
        sys.path.insert(0, src_path)

    if args.data_dir:
        os.environ["CATALOG_PRICING_DATA_DIR"] = str(Path(args.data_dir).resolve())

    print(f"Starting Catalog Pricing API on {args.host}:{args.port}...")
    uvicorn.run(
        "catalog_pricing.api.main:app",
        host=args.host,
        port=args.port,
        reload=args.reload,
        app_dir=src_path,
    )


if __name__ == "__main__":
    main()
