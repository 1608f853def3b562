import json

from ..base import Instrumenter
from ..nodes import (
    AssignStmt,
    BasicLit,
    BinaryExpr,
    BlockStmt,
    CallExpr,
    DeferStmt,
    ExprStmt,
    FuncLit,
    FuncType,
    Ident,
    IfStmt,
    SelectorExpr,
)
from ..registry import register

OTEL_PATH = "go.opentelemetry.io/otel"
CODES_PATH = "go.opentelemetry.io/otel/codes"


def _go_string(value: str) -> BasicLit:
    # JSON string escapes are a subset of Go's interpreted string literals.
    return BasicLit(json.dumps(value))


def _call(recv: str, method: str, *args) -> CallExpr:
    return CallExpr(SelectorExpr(Ident(recv), Ident(method)), list(args))


@register
class OpenTelemetry(Instrumenter):
    """Starts an OpenTelemetry span and ends it when the function returns.

    For functions with a named ``err`` result the span status is set and the
    error recorded on the way out.

    The import list is fixed for a run, so the ``codes`` package is imported
    even into files where no instrumented function has an ``err`` result.
    Go rejects that unused import; use ``otel-spans`` for such files.
    """

    name = "otel"
    record_errors = True

    def __init__(self, tracer_name="app", context_name="ctx", error_name="err"):
        self.tracer_name = tracer_name
        self.context_name = context_name
        self.error_name = error_name

    def imports(self):
        if self.record_errors:
            return [OTEL_PATH, CODES_PATH]
        return [OTEL_PATH]

    def prefix_statements(self, span_name, has_error):
        # ctx, span := otel.Tracer("app").Start(ctx, "pkg.Func")
        tracer = _call("otel", "Tracer", _go_string(self.tracer_name))
        start = CallExpr(
            SelectorExpr(tracer, Ident("Start")),
            [Ident(self.context_name), _go_string(span_name)],
        )
        stmts = [
            AssignStmt([Ident(self.context_name), Ident("span")], ":=", [start]),
            DeferStmt(_call("span", "End")),
        ]
        if has_error and self.record_errors:
            stmts.append(self._record_error())
        return stmts

    def _record_error(self):
        check = IfStmt(
            BinaryExpr(Ident(self.error_name), "!=", Ident("nil")),
            BlockStmt([
                ExprStmt(_call("span", "SetStatus",
                               SelectorExpr(Ident("codes"), Ident("Error")),
                               _go_string("error"))),
                ExprStmt(_call("span", "RecordError", Ident(self.error_name))),
            ]),
        )
        closure = FuncLit(FuncType(), BlockStmt([check]))
        return DeferStmt(CallExpr(closure, []))


@register
class OpenTelemetrySpans(OpenTelemetry):
    """Spans only: errors are not recorded and ``codes`` is never imported."""

    name = "otel-spans"
    record_errors = False
