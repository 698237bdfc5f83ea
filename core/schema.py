SCHEMA_SQL = r"""
-- One JSON document per collection (breads, materials, recipes, sales, breadCosts, breadUnits)
CREATE TABLE IF NOT EXISTS documents (
  key TEXT PRIMARY KEY,
  value TEXT NOT NULL,
  updated_at TEXT NOT NULL               -- ISO datetime
);
"""

SNAPSHOT_KEYS = ("breads", "materials", "recipes", "sales")
