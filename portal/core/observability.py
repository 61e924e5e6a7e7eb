import logging

import phoenix as px
from openinference.instrumentation.llama_index import LlamaIndexInstrumentor
from opentelemetry.exporter.otlp.proto.http.trace_exporter import OTLPSpanExporter
from opentelemetry.sdk import trace as trace_sdk
from opentelemetry.sdk.trace.export import SimpleSpanProcessor

logger = logging.getLogger(__name__)

PHOENIX_TRACES_ENDPOINT = "http://127.0.0.1:6006/v1/traces"


def init_observability():
    """
    Starts a local Arize Phoenix instance and routes LlamaIndex traces to it.
    Covers the ICONIX agents, the chat tool loop and embedding calls.
    """
    try:
        px.launch_app()

        tracer_provider = trace_sdk.TracerProvider()
        tracer_provider.add_span_processor(SimpleSpanProcessor(OTLPSpanExporter(PHOENIX_TRACES_ENDPOINT)))

        LlamaIndexInstrumentor().instrument(tracer_provider=tracer_provider)

        logger.info("Phoenix observability initialized, traces at http://localhost:6006")

    except Exception as e:
        logger.warning(f"Failed to initialize Arize Phoenix: {e}")
