import importlib
import sys
from unittest.mock import MagicMock, patch

import pytest
import streamlit as st


class StopRun(Exception):
    pass


def test_health_check_configures_page_before_writing():
    calls = MagicMock()
    with patch.object(st, "query_params", {"health": "1"}), \
            patch.object(st, "set_page_config", calls.set_page_config), \
            patch.object(st, "write", calls.write), \
            patch.object(st, "stop", side_effect=StopRun), \
            patch("utils.session_manager.get_client") as mock_get_client:
        sys.modules.pop("app", None)
        with pytest.raises(StopRun):
            importlib.import_module("app")

    assert [c[0] for c in calls.mock_calls] == ["set_page_config", "write"]
    assert calls.write.call_args.args[0]["status"] == "ok"
    mock_get_client.assert_not_called()
