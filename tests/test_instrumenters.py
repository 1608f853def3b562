"""
Tests for the OpenTelemetry instrumenter and the instrumenter registry.
"""
from fakes import ROOT  # noqa: F401
from goinstrument import instrumenters  # noqa: F401
from goinstrument.instrumenters.otel import CODES_PATH, OTEL_PATH, OpenTelemetry, OpenTelemetrySpans
from goinstrument.nodes import walk
from goinstrument.printer import Printer
from goinstrument.registry import available_instrumenters, get_instrumenter


def render(stmts):
    printer = Printer()
    return [printer.stmt(s, 1) for s in stmts]


class TestOpenTelemetry:

    def test_imports(self):
        assert OpenTelemetry().imports() == [OTEL_PATH, CODES_PATH]

    def test_statements_without_error(self):
        lines = render(OpenTelemetry(tracer_name="billing").prefix_statements("svc.Do", False))
        assert lines == [
            'ctx, span := otel.Tracer("billing").Start(ctx, "svc.Do")',
            "defer span.End()",
        ]

    def test_statements_with_error(self):
        lines = render(OpenTelemetry().prefix_statements("svc.Do", True))
        assert lines[2] == (
            "defer func() {\n"
            "\t\tif err != nil {\n"
            '\t\t\tspan.SetStatus(codes.Error, "error")\n'
            "\t\t\tspan.RecordError(err)\n"
            "\t\t}\n"
            "\t}()"
        )

    def test_custom_argument_names(self):
        inst = OpenTelemetry(context_name="c", error_name="e")
        lines = render(inst.prefix_statements("x", True))
        assert lines[0] == 'c, span := otel.Tracer("app").Start(c, "x")'
        assert "if e != nil" in lines[2]
        assert "span.RecordError(e)" in lines[2]

    def test_span_name_is_quoted(self):
        lines = render(OpenTelemetry().prefix_statements('odd"name', False))
        assert lines[0].endswith('Start(ctx, "odd\\"name")')

    def test_each_call_returns_fresh_nodes(self):
        inst = OpenTelemetry()
        first = [n for s in inst.prefix_statements("a", True) for n in walk(s)]
        second = [n for s in inst.prefix_statements("a", True) for n in walk(s)]
        assert {id(n) for n in first}.isdisjoint(id(n) for n in second)


class TestOpenTelemetrySpans:

    def test_imports_only_otel(self):
        assert OpenTelemetrySpans().imports() == [OTEL_PATH]

    def test_no_error_closure(self):
        lines = render(OpenTelemetrySpans().prefix_statements("svc.Do", True))
        assert lines == [
            'ctx, span := otel.Tracer("app").Start(ctx, "svc.Do")',
            "defer span.End()",
        ]


class TestRegistry:

    def test_otel_is_registered(self):
        assert "otel" in available_instrumenters()
        assert "otel-spans" in available_instrumenters()

    def test_get_instrumenter_passes_options(self):
        inst = get_instrumenter("otel", tracer_name="orders")
        assert isinstance(inst, OpenTelemetry)
        assert inst.tracer_name == "orders"

    def test_unknown_name(self):
        assert get_instrumenter("missing") is None
