#!/usr/bin/env python3
"""DB 레코드를 검색 인덱스로 재색인한다.

사용 예시:
  python scripts/index_records.py index -all
  python scripts/index_records.py index -firm -from 0 -to 5000 -batch-size 1000
  python scripts/index_records.py index -from-date 2026-10-01T00:00:00Z
"""

from __future__ import annotations

import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from search_indexer.cli import main


if __name__ == "__main__":
    sys.exit(main())
