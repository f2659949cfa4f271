"""
Sanity check for a course catalog file.
1. Load the configured catalog (COURSEPILOT_CATALOG_PATH or the bundled one)
2. Report prerequisites that point at courses missing from the catalog
3. Report courses caught in prerequisite cycles

Usage: python scripts/check_catalog.py [path/to/catalog.json|.csv]
"""
import sys
from pathlib import Path

from coursepilot.core.logging import configure_logging
from coursepilot.services.catalog import load_catalog_csv, load_catalog_json, load_default_catalog

configure_logging()

if len(sys.argv) > 1:
    path = Path(sys.argv[1])
    catalog = load_catalog_csv(path) if path.suffix.lower() == ".csv" else load_catalog_json(path)
else:
    catalog = load_default_catalog()

print(f"{len(catalog)} courses across {len(catalog.subject_summary())} subjects")

dangling = 0
for course in catalog.values():
    unknown = [code for code in course.prerequisites if code not in catalog]
    if unknown:
        dangling += 1
        print(f"  {course.code}: unknown prerequisites {', '.join(unknown)}")

cycles = catalog.graph.find_cycles()
if cycles:
    print(f"Courses in or behind a prerequisite cycle: {', '.join(cycles)}")

print(f"Done. {dangling} courses with unknown prerequisites, {len(cycles)} in cycles.")
