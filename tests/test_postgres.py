"""
Unit tests for the PostgreSQL plan producer.
"""

import unittest
from qpml import postgres
from qpml.errors import InputUnreadableError, SerializationMismatchError
from qpml.model import Node

EXPLAIN_RESULT = [
    {
        "Plan": {
            "Node Type": "Hash Join",
            "Join Type": "Inner",
            "Hash Cond": "(o.customer_id = c.id)",
            "Plans": [
                {
                    "Node Type": "Seq Scan",
                    "Relation Name": "orders",
                    "Alias": "o",
                },
                {
                    "Node Type": "Hash",
                    "Plans": [
                        {
                            "Node Type": "Index Scan",
                            "Index Name": "customers_pkey",
                            "Relation Name": "customers",
                            "Alias": "customers",
                            "Index Cond": "(id < 10)",
                        }
                    ],
                },
            ],
        }
    }
]


class DummyCursor:
    def __init__(self):
        self.queries = []
        self.closed = False

    def execute(self, query, params=None):
        self.queries.append((query, params))

    def fetchone(self):
        # return a single row stored on the instance
        return getattr(self, "_row", None)

    def close(self):
        self.closed = True


class DummyConn:
    def __init__(self):
        self.closed = False
        self.cursor_obj = DummyCursor()

    def cursor(self):
        return self.cursor_obj

    def set_session(self, **kwargs):
        pass

    def close(self):
        self.closed = True


class TestFromExplainJson(unittest.TestCase):
    def test_tree(self):
        doc = postgres.from_explain_json(EXPLAIN_RESULT)
        expected = Node(
            "Hash Join: (o.customer_id = c.id)",
            [
                Node.leaf("Seq Scan on orders o", "scan"),
                Node(
                    "Hash",
                    [
                        Node.leaf(
                            "Index Scan using customers_pkey on customers: (id < 10)",
                            "scan",
                        )
                    ],
                    "hash",
                ),
            ],
            "join",
        )
        self.assertEqual(doc.diagram, expected)
        self.assertEqual(doc.styles, postgres.DEFAULT_STYLES)

    def test_plan_wrapper_and_bare_plan(self):
        wrapped = postgres.from_explain_json(EXPLAIN_RESULT[0])
        bare = postgres.from_explain_json(EXPLAIN_RESULT[0]["Plan"])
        self.assertEqual(wrapped, bare)

    def test_outer_join_type_in_title(self):
        doc = postgres.from_explain_json(
            {"Node Type": "Nested Loop", "Join Type": "Left", "Plans": []}
        )
        self.assertEqual(doc.diagram, Node.leaf("Nested Loop (Left)", "join"))

    def test_style_name(self):
        self.assertEqual(postgres.style_name("Bitmap Heap Scan"), "scan")
        self.assertEqual(postgres.style_name("Merge Join"), "join")
        self.assertEqual(postgres.style_name("Nested Loop"), "join")
        self.assertEqual(postgres.style_name("Gather Merge"), "gather_merge")

    def test_not_a_plan(self):
        with self.assertRaises(SerializationMismatchError):
            postgres.from_explain_json({"Plan": {"Plans": []}})

    def test_several_plans(self):
        with self.assertRaises(SerializationMismatchError):
            postgres.from_explain_json(EXPLAIN_RESULT * 2)

    def test_bad_child(self):
        with self.assertRaises(SerializationMismatchError) as exc:
            postgres.from_explain_json({"Node Type": "Sort", "Plans": ["x"]})
        self.assertEqual(exc.exception.field, "Plan.Plans[0]")


class TestPostgresPlanSource(unittest.TestCase):
    def setUp(self):
        # patch psycopg2.connect before creating the source
        self._orig_connect = postgres.psycopg2.connect
        self.connect_kwargs = {}

        def connect(**kwargs):
            self.connect_kwargs = kwargs
            return DummyConn()

        postgres.psycopg2.connect = connect
        self.source = postgres.PostgresPlanSource("postgres://u:p@h:5433/db")

    def tearDown(self):
        # restore original psycopg2.connect
        postgres.psycopg2.connect = self._orig_connect

    def test_connection_url(self):
        self.assertEqual(
            self.connect_kwargs,
            {"database": "db", "user": "u", "password": "p", "host": "h", "port": 5433},
        )

    def test_explain(self):
        self.source.cur._row = (EXPLAIN_RESULT,)
        doc = self.source.explain("SELECT * FROM orders;\n")

        self.assertEqual(
            self.source.cur.queries,
            [("EXPLAIN (FORMAT JSON) SELECT * FROM orders", None)],
        )
        self.assertEqual(doc.diagram.title, "Hash Join: (o.customer_id = c.id)")

    def test_explain_text_result(self):
        self.source.cur._row = ('[{"Plan": {"Node Type": "Result"}}]',)
        doc = self.source.explain("SELECT 1")
        self.assertEqual(doc.diagram, Node.leaf("Result", "result"))

    def test_invalid_json_result(self):
        self.source.cur._row = ('[{"Plan": ',)
        with self.assertRaises(SerializationMismatchError) as exc:
            self.source.explain("SELECT 1")
        self.assertEqual(exc.exception.field, "explain")

    def test_no_result(self):
        self.source.cur._row = None
        with self.assertRaises(SerializationMismatchError):
            self.source.fetch_plan("SELECT 1")

    def test_connection_failure(self):
        def refuse(**kwargs):
            raise postgres.psycopg2.OperationalError("connection refused")

        postgres.psycopg2.connect = refuse
        with self.assertRaises(InputUnreadableError):
            postgres.PostgresPlanSource("postgres://u:p@h/db")

    def test_disconnect(self):
        # make sure objects are torn down
        cursor = self.source.cur
        self.source.disconnect()
        self.assertTrue(cursor.closed)
        self.assertIsNone(self.source.cur)
        self.assertIsNone(self.source.connection)


if __name__ == "__main__":
    unittest.main()
