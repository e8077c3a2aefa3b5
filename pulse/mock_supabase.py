import copy
import uuid
from datetime import datetime, timezone

class MockSupabaseClient:
    """In-memory stand-in for the Supabase client, used with MOCK_DB=true and in tests."""

    def __init__(self, data=None):
        self.data = {
            "profiles": [],
            "training_plans": [],
            "workouts": [],
            "ai_chat_logs": [],
        }
        if data:
            for table_name, rows in data.items():
                self.data[table_name] = [dict(row) for row in rows]

    def table(self, table_name):
        self.data.setdefault(table_name, [])
        return MockQuery(self, table_name)

    def _insert_rows(self, table_name, rows):
        inserted = []
        for row in rows:
            row = dict(row)
            if "id" not in row:
                row["id"] = str(uuid.uuid4())
            if "created_at" not in row:
                row["created_at"] = datetime.now(timezone.utc).isoformat()
            self.data[table_name].append(row)
            inserted.append(row)
        return inserted

    def _update_rows(self, table_name, rows, values):
        for row in rows:
            row.update(values)
        return rows

    def _delete_rows(self, table_name, rows):
        ids = {id(row) for row in rows}
        self.data[table_name] = [r for r in self.data[table_name] if id(r) not in ids]
        return rows


class MockQuery:
    def __init__(self, client, table_name):
        self.client = client
        self.table_name = table_name
        self.query_filters = []
        self.operation = "select"
        self.payload = None
        self.order_by = None
        self.limit_count = None

    def select(self, columns="*"):
        return self

    def insert(self, data):
        self.operation = "insert"
        self.payload = data if isinstance(data, list) else [data]
        return self

    def update(self, data):
        self.operation = "update"
        self.payload = data
        return self

    def delete(self):
        self.operation = "delete"
        return self

    def eq(self, column, value):
        self.query_filters.append(lambda row: str(row.get(column)) == str(value))
        return self

    def neq(self, column, value):
        self.query_filters.append(lambda row: str(row.get(column)) != str(value))
        return self

    def in_(self, column, values):
        allowed = {str(v) for v in values}
        self.query_filters.append(lambda row: str(row.get(column)) in allowed)
        return self

    def gte(self, column, value):
        self.query_filters.append(lambda row: row.get(column) is not None and row.get(column) >= value)
        return self

    def lte(self, column, value):
        self.query_filters.append(lambda row: row.get(column) is not None and row.get(column) <= value)
        return self

    def lt(self, column, value):
        self.query_filters.append(lambda row: row.get(column) is not None and row.get(column) < value)
        return self

    def order(self, column, desc=False):
        self.order_by = (column, desc)
        return self

    def limit(self, count):
        self.limit_count = count
        return self

    def execute(self):
        if self.operation == "insert":
            rows = self.client._insert_rows(self.table_name, self.payload)
            return MockResponse(copy.deepcopy(rows))

        rows = self.client.data.get(self.table_name, [])
        for f in self.query_filters:
            rows = [r for r in rows if f(r)]

        if self.operation == "update":
            rows = self.client._update_rows(self.table_name, rows, self.payload)
            return MockResponse(copy.deepcopy(rows))

        if self.operation == "delete":
            rows = self.client._delete_rows(self.table_name, rows)
            return MockResponse(copy.deepcopy(rows))

        if self.order_by:
            column, desc = self.order_by
            # Ties keep insertion order relative to the sort direction
            indexed = sorted(
                enumerate(rows),
                key=lambda pair: (pair[1].get(column) is None, pair[1].get(column), pair[0]),
                reverse=desc,
            )
            rows = [row for _, row in indexed]

        if self.limit_count is not None:
            rows = rows[:self.limit_count]

        return MockResponse(copy.deepcopy(rows))

class MockResponse:
    def __init__(self, data):
        self.data = data
