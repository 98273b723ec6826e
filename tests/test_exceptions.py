from agent_stream.exceptions import (
    AgentStreamError,
    AgentTimeoutError,
    ConfigurationError,
    ToolArgumentError,
    TransportError,
    UnknownToolError,
)


class TestExceptionHierarchy:
    def test_all_exceptions_inherit_from_agent_stream_error(self):
        for exc_class in [
            AgentTimeoutError,
            ConfigurationError,
            ToolArgumentError,
            TransportError,
            UnknownToolError,
        ]:
            assert issubclass(exc_class, AgentStreamError)

    def test_agent_stream_error_inherits_from_exception(self):
        assert issubclass(AgentStreamError, Exception)

    def test_exceptions_carry_message(self):
        err = ConfigurationError("missing key")
        assert str(err) == "missing key"

    def test_transport_error_details(self):
        err = TransportError("API error", provider="mistral", status_code=503)
        assert err.provider == "mistral"
        assert err.status_code == 503

    def test_unknown_tool_details(self):
        err = UnknownToolError("bogus_tool", ["search"])
        assert str(err) == "Unknown tool: bogus_tool"
        assert err.available == ["search"]
