"""Tests for the context_builder module."""

import pytest
from pydantic import ValidationError

from conftest import STORE_SPEC
from gddgen import context_builder
from gddgen.config import Settings
from gddgen.context_builder import build_context, build_graph, build_manifest, generate
from gddgen.loader import load_spec


class TestBuildGraph:
    """Test the full pipeline with the store fixture."""

    @classmethod
    def setup_class(cls):
        """Load spec and build the graph once for all tests."""
        cls.spec = load_spec(STORE_SPEC)
        cls.graph = build_graph(cls.spec)
        cls.ops_by_id = {op.nickname: op for op in cls.graph.operations}

    def test_models_in_declared_order(self):
        assert list(self.graph.models) == ["Order", "Product", "UserAccount", "PremiumAccount", "Empty"]

    def test_order_product_cycle(self):
        assert self.graph.models["Order"].required_models == ["Product", "UserAccount"]
        assert self.graph.models["Product"].required_models == ["Order"]

    def test_no_self_loops(self):
        for name, model in self.graph.models.items():
            assert name not in model.required_models

    def test_operation_walk_order(self):
        assert [(op.http_method, op.path) for op in self.graph.operations] == [
            ("GET", "/orders"),
            ("POST", "/orders"),
            ("GET", "/orders/{orderId}"),
            ("DELETE", "/orders/{orderId}"),
            ("GET", "/orders/{orderId}/total"),
            ("PUT", "/accounts"),
            ("POST", "/accounts"),
            ("GET", "/reports/count"),
            ("GET", "/reports/stale"),
        ]

    def test_shared_parameter_ref_resolved(self):
        limit = self.ops_by_id["list_orders"].parameters[0]
        assert limit.base_name == "limit"
        assert limit.format == "int32"
        assert limit.default_value == 20

    def test_query_array_parameters(self):
        params = {p.base_name: p for p in self.ops_by_id["list_orders"].parameters}
        assert params["statusCodes"].is_primitive_type is True
        assert params["statusCodes"].collection_format == "csv"
        assert params["filter"].is_primitive_type is None

    def test_operation_overrides_path_parameter(self):
        params = self.ops_by_id["get_order_by_id"].parameters
        assert len(params) == 1
        assert params[0].format == "int64"
        assert params[0].data_type == "string"

    def test_path_parameter_inherited(self):
        params = self.ops_by_id["delete_order"].parameters
        assert [p.base_name for p in params] == ["orderId"]

    def test_missing_parameter_ref_skipped(self):
        assert all(p.base_name != "missingParam" for p in self.ops_by_id["delete_order"].parameters)

    def test_return_format(self):
        assert self.ops_by_id["get_orders_order_id_total"].return_format == "int64"
        assert self.ops_by_id["get_order_by_id"].return_format is None

    def test_default_response_format(self):
        assert self.ops_by_id["update_account"].return_format == "date-time"

    def test_shared_response_ref_followed(self):
        count = self.ops_by_id["count_orders"]
        assert count.return_type == "string"
        assert count.return_is_primitive is True
        assert count.return_format == "int64"

    def test_dangling_response_ref_keeps_position(self):
        """The unresolvable 200 is still the success response; it has no schema."""
        stale = self.ops_by_id["stale_report"]
        assert stale.return_type is None
        assert stale.return_format is None

    def test_body_parameters(self):
        create = self.ops_by_id["create_orders"].parameters[0]
        assert create.location == "body"
        assert create.is_primitive_type is False
        update = self.ops_by_id["update_account"].parameters[0]
        assert update.is_primitive_type is None
        emails = self.ops_by_id["import_accounts"].parameters[0]
        assert emails.is_primitive_type is True

    def test_header_parameter_name(self):
        header = self.ops_by_id["update_account"].parameters[1]
        assert header.param_name == "x_request_id"
        assert header.format == "uuid"

    def test_resources(self):
        assert self.ops_by_id["list_orders"].resource == "store-order"
        assert self.ops_by_id["delete_order"].resource == "default"

    def test_info(self):
        info = self.graph.info
        assert info.name == "swagger-store"
        assert info.version == "1.0.0"
        assert info.base_path == "/v1"

    def test_graph_is_frozen(self):
        model = self.graph.models["Order"]
        with pytest.raises(ValidationError):
            model.filename = "./other.json"
        assert model.filename == "./order.json"


class TestManifestAndContext:
    @classmethod
    def setup_class(cls):
        cls.graph = build_graph(load_spec(STORE_SPEC))

    def test_manifest_paths(self):
        manifest = build_manifest(self.graph)
        assert manifest.paths == [
            "order.json",
            "product.json",
            "user_account.json",
            "premium_account.json",
            "empty.json",
            "api.json",
        ]

    def test_manifest_matches_model_filenames(self):
        manifest = build_manifest(self.graph)
        for entry in manifest.entries:
            if entry.kind == "model":
                assert "./" + entry.path == self.graph.models[entry.model].filename

    def test_context_keys(self):
        ctx = build_context(self.graph)
        assert ctx["model_count"] == 5
        assert ctx["operation_count"] == 9
        assert ctx["resources"]["user-account"] == ["update_account", "import_accounts"]
        assert ctx["manifest"][-1] == {"kind": "api", "path": "api.json"}

    def test_context_uses_template_names(self):
        ctx = build_context(self.graph)
        order = ctx["models"][0]
        assert order["filename"] == "./order.json"
        assert order["requiredModels"] == ["Product", "UserAccount"]
        id_prop = order["properties"][0]
        assert id_prop["isReadOnly"] is True
        assert id_prop["format"] == "int64"

    def test_context_omits_unset(self):
        ctx = build_context(self.graph)
        list_orders = ctx["operations"][0]
        filter_param = next(p for p in list_orders["parameters"] if p["baseName"] == "filter")
        assert "isPrimitiveType" not in filter_param
        assert "returnFormat" not in list_orders


class TestGenerate:
    def test_settings_overrides(self, spec):
        settings = Settings(type_mapping_overrides={"long": "integer"}, api_filename="discovery.json")
        graph, manifest = generate(spec, settings)
        order_id = graph.models["Order"].properties[0]
        assert order_id.datatype == "integer"
        assert manifest.paths[-1] == "discovery.json"

    def test_reserved_words(self, spec):
        graph, _ = generate(spec, Settings(reserved_words=["name"]))
        assert graph.models["Product"].properties[0].name == "_name"

    def test_defaults(self, spec):
        graph, manifest = generate(spec)
        assert graph.models["Order"].properties[0].datatype == "string"
        assert manifest.paths[-1] == "api.json"

    def test_env_prefix(self, monkeypatch):
        monkeypatch.setenv("GDDGEN_API_FILENAME", "env.json")
        assert Settings().api_filename == "env.json"

    def test_logging_configured_from_settings(self, spec, monkeypatch):
        calls = []
        monkeypatch.setattr(context_builder, "setup_logging", lambda *args: calls.append(args))
        generate(spec, Settings(log_level="DEBUG", log_json=True))
        assert calls == [("DEBUG", True)]

    def test_log_level_filters_events(self, spec, capsys):
        generate(spec, Settings(log_level="WARNING"))
        assert "model graph built" not in capsys.readouterr().err

        generate(spec, Settings(log_level="INFO", log_json=True))
        assert '"event": "model graph built"' in capsys.readouterr().err
