# crossbuild/shared/observability.py
from opentelemetry import trace
from opentelemetry.sdk.resources import Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor, ConsoleSpanExporter

from crossbuild import __version__
from crossbuild.shared.config import settings


def setup_observability(export_to_console: bool = None) -> TracerProvider:
    """
    Configures OpenTelemetry for the CLI process.

    1. Sets the Global Tracer Provider (service name + version identity).
    2. Optionally prints finished spans to the console, which shows how
       long every pipeline step took.
    """
    if export_to_console is None:
        export_to_console = settings.TRACE_CONSOLE

    resource = Resource.create(attributes={
        "service.name": settings.APP_NAME,
        "service.version": __version__,
    })
    provider = TracerProvider(resource=resource)

    if export_to_console:
        provider.add_span_processor(BatchSpanProcessor(ConsoleSpanExporter()))

    trace.set_tracer_provider(provider)
    return provider


def get_tracer(name: str):
    """
    Utility to get a tracer for manual instrumentation in Use Cases.
    Usage:
        tracer = get_tracer(__name__)
        with tracer.start_as_current_span("pipeline.native"):
            ...
    """
    return trace.get_tracer(name)
