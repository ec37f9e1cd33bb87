"""Tests for the demo entry point."""

import main as demo
from flowgraph.validator import validate_flow


class TestDemo:
    def test_demo_reads_environment_settings(self, monkeypatch):
        """The demo builds its settings from FLOW_* variables like the other entry points."""
        saved = []
        monkeypatch.setenv("FLOW_NAME", "Demo flow")
        monkeypatch.setattr(demo, "save_flow", lambda document, path: saved.append(document))

        demo.main()

        assert len(saved) == 1
        assert saved[0].metadata.name == "Demo flow"
        assert validate_flow(saved[0]).ok is True
