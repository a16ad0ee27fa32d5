import itertools
import tempfile
import threading
import time
import unittest
from dataclasses import dataclass
from pathlib import Path
from unittest import mock

from receiver.mappers import (
    ConfigError,
    FieldsHelper,
    InitializationError,
    PathResolutionError,
    build_setter_registry,
    inflate,
    load_mapping_table,
    parse_mapping_table,
)
from receiver.mappers import fields as fields_module
from receiver.service_meta import ServiceMetaInfo


@dataclass
class Named:
    name: str = "unset"
    other: str = "unset"


def _bind(text, record_type=Named):
    table = parse_mapping_table(text)
    return table, build_setter_registry(table, record_type)


class InflateTest(unittest.TestCase):
    def test_sets_value_at_nested_path(self):
        table, setters = _bind("name: a.b\n")
        record = Named()
        inflate({"a": {"b": "X"}}, table, setters, record)
        self.assertEqual(record.name, "X")

    def test_missing_segment_fails_without_setting(self):
        table, setters = _bind("name: a.b\n")
        record = Named()
        with self.assertRaises(PathResolutionError) as ctx:
            inflate({"a": {}}, table, setters, record)
        self.assertEqual(record.name, "unset")
        self.assertEqual(ctx.exception.field, "name")
        self.assertEqual(ctx.exception.path, ("a", "b"))
        self.assertEqual(ctx.exception.segment, "b")

    def test_nested_terminal_yields_empty_value(self):
        table, setters = _bind("name: a\n")
        record = Named()
        inflate({"a": {"b": "X"}}, table, setters, record)
        self.assertEqual(record.name, "")

    def test_non_string_scalars_yield_empty_value(self):
        table, setters = _bind("name: a\n")
        for value in (42, 1.5, True, None, ["x"]):
            with self.subTest(value=value):
                record = Named()
                inflate({"a": value}, table, setters, record)
                self.assertEqual(record.name, "")

    def test_strict_mode_rejects_non_textual_terminal(self):
        table, setters = _bind("name: a\n")
        with self.assertRaises(PathResolutionError):
            inflate({"a": {"b": "X"}}, table, setters, Named(), strict=True)

    def test_descending_through_scalar_fails(self):
        table, setters = _bind("name: a.b\n")
        with self.assertRaises(PathResolutionError) as ctx:
            inflate({"a": "X"}, table, setters, Named())
        self.assertIn("non-mapping", str(ctx.exception))

    def test_failure_aborts_remaining_fields(self):
        table, setters = _bind("name: a\nother: missing\n")
        record = Named()
        with self.assertRaises(PathResolutionError):
            inflate({"a": "first"}, table, setters, record)
        self.assertEqual(record.name, "first")
        self.assertEqual(record.other, "unset")

    def test_entry_order_does_not_change_result(self):
        entries = ["name: LABELS.app", "other: NAME"]
        document = {"NAME": "reviews-v1", "LABELS": {"app": "reviews"}}
        results = set()
        for ordering in itertools.permutations(entries):
            table, setters = _bind("\n".join(ordering) + "\n")
            record = Named()
            inflate(document, table, setters, record)
            results.add((record.name, record.other))
        self.assertEqual(results, {("reviews", "reviews-v1")})

    def test_document_is_not_modified(self):
        table, setters = _bind("name: a.b\n")
        document = {"a": {"b": "X"}}
        inflate(document, table, setters, Named())
        self.assertEqual(document, {"a": {"b": "X"}})


class FieldsHelperTest(unittest.TestCase):
    def setUp(self):
        self._tmp = tempfile.TemporaryDirectory()
        self.addCleanup(self._tmp.cleanup)
        self.mapping_file = Path(self._tmp.name) / "mapping.yaml"
        self.mapping_file.write_text(
            "serviceName: LABELS.app\nserviceInstanceName: NAME\n", encoding="utf-8"
        )

    def test_inflates_service_meta_info(self):
        helper = FieldsHelper(ServiceMetaInfo)
        helper.init(self.mapping_file)
        record = helper.new_record()
        helper.inflate({"NAME": "productpage-v1-123", "LABELS": {"app": "productpage"}}, record)
        self.assertEqual(record.service_name, "productpage")
        self.assertEqual(record.service_instance_name, "productpage-v1-123")
        self.assertEqual(helper.mapping_file, self.mapping_file)

    def test_second_init_does_not_reload(self):
        helper = FieldsHelper(ServiceMetaInfo)
        with mock.patch.object(fields_module, "load_mapping_table", wraps=load_mapping_table) as loader:
            helper.init(self.mapping_file)
            helper.init(self.mapping_file)
        self.assertEqual(loader.call_count, 1)
        self.assertTrue(helper.initialized)

    def test_changed_path_after_init_is_ignored(self):
        helper = FieldsHelper(ServiceMetaInfo)
        helper.init(self.mapping_file)
        other = Path(self._tmp.name) / "other.yaml"
        with self.assertLogs("mxfields.fields", level="WARNING"):
            helper.init(other)
        self.assertEqual(helper.mapping_file, self.mapping_file)

    def test_concurrent_first_init_loads_once(self):
        helper = FieldsHelper(ServiceMetaInfo)
        barrier = threading.Barrier(8)

        def slow_load(path):
            time.sleep(0.05)
            return load_mapping_table(path)

        def worker():
            barrier.wait()
            helper.init(self.mapping_file)

        with mock.patch.object(fields_module, "load_mapping_table", side_effect=slow_load) as loader:
            threads = [threading.Thread(target=worker) for _ in range(8)]
            for thread in threads:
                thread.start()
            for thread in threads:
                thread.join()
        self.assertEqual(loader.call_count, 1)
        self.assertEqual(set(helper.field_mappings), {"serviceName", "serviceInstanceName"})

    def test_failed_init_can_be_retried(self):
        helper = FieldsHelper(ServiceMetaInfo)
        with self.assertRaises(ConfigError):
            helper.init(Path(self._tmp.name) / "missing.yaml")
        self.assertFalse(helper.initialized)
        helper.init(self.mapping_file)
        self.assertTrue(helper.initialized)

    def test_unknown_field_fails_init(self):
        self.mapping_file.write_text("serviceOwner: LABELS.owner\n", encoding="utf-8")
        helper = FieldsHelper(ServiceMetaInfo)
        with self.assertRaises(InitializationError) as ctx:
            helper.init(self.mapping_file)
        self.assertEqual(ctx.exception.field, "serviceOwner")
        self.assertFalse(helper.initialized)
        self.assertEqual(dict(helper.field_mappings), {})

    def test_inflate_before_init_fails(self):
        helper = FieldsHelper(ServiceMetaInfo)
        with self.assertRaises(InitializationError):
            helper.inflate({"NAME": "x"}, helper.new_record())

    def test_independent_helpers(self):
        other_file = Path(self._tmp.name) / "other.yaml"
        other_file.write_text("serviceName: NAME\n", encoding="utf-8")
        first = FieldsHelper(ServiceMetaInfo)
        second = FieldsHelper(ServiceMetaInfo)
        first.init(self.mapping_file)
        second.init(other_file)
        document = {"NAME": "ratings-v1", "LABELS": {"app": "ratings"}}
        a, b = first.new_record(), second.new_record()
        first.inflate(document, a)
        second.inflate(document, b)
        self.assertEqual(a.service_name, "ratings")
        self.assertEqual(b.service_name, "ratings-v1")


if __name__ == "__main__":
    unittest.main()
