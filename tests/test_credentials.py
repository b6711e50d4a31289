"""Tests for the local credential store."""

import json
import os
import stat
import sys

import pytest

from prior_mcp.credentials import CredentialRecord, CredentialStore, get_config_path


class TestCredentialRecord:
    def test_to_dict_uses_wire_keys(self):
        record = CredentialRecord(api_key="ask_1", agent_id="ag_1")
        assert record.to_dict() == {"apiKey": "ask_1", "agentId": "ag_1"}

    def test_from_dict_requires_api_key(self):
        assert CredentialRecord.from_dict({"agentId": "ag_1"}) is None
        assert CredentialRecord.from_dict({"apiKey": ""}) is None
        assert CredentialRecord.from_dict({"apiKey": 42}) is None

    def test_from_dict_missing_agent_id(self):
        record = CredentialRecord.from_dict({"apiKey": "ask_1"})
        assert record == CredentialRecord(api_key="ask_1", agent_id="")


class TestCredentialStore:
    def test_default_path_under_prior_home(self, isolated_env):
        assert get_config_path() == isolated_env / "config.json"
        assert CredentialStore().path == isolated_env / "config.json"

    def test_load_missing_file(self):
        store = CredentialStore()
        assert store.load() is None
        assert store.cached is None

    @pytest.mark.parametrize(
        "content",
        ["{not json", "[1, 2]", '"just a string"', '{"agentId": "ag_1"}'],
    )
    def test_load_malformed_returns_none(self, isolated_env, content):
        (isolated_env / "config.json").write_text(content)
        assert CredentialStore().load() is None

    def test_save_then_load(self):
        store = CredentialStore()
        record = CredentialRecord(api_key="ask_abc", agent_id="ag_xyz")
        store.save(record)

        assert store.cached == record
        assert CredentialStore().load() == record

    def test_save_writes_wire_format(self, isolated_env):
        CredentialStore().save(CredentialRecord(api_key="ask_abc", agent_id="ag_xyz"))
        data = json.loads((isolated_env / "config.json").read_text())
        assert data == {"apiKey": "ask_abc", "agentId": "ag_xyz"}

    @pytest.mark.skipif(sys.platform == "win32", reason="POSIX permissions")
    def test_save_is_owner_only(self, isolated_env):
        CredentialStore().save(CredentialRecord(api_key="ask_abc"))
        mode = stat.S_IMODE(os.stat(isolated_env / "config.json").st_mode)
        assert mode == 0o600

    def test_save_creates_parent_dirs(self, tmp_path):
        path = tmp_path / "nested" / "dir" / "config.json"
        CredentialStore(path).save(CredentialRecord(api_key="ask_abc"))
        assert path.exists()

    def test_save_replaces_wholesale(self, isolated_env):
        store = CredentialStore()
        store.save(CredentialRecord(api_key="ask_old", agent_id="ag_old"))
        store.save(CredentialRecord(api_key="ask_new"))
        assert json.loads((isolated_env / "config.json").read_text()) == {
            "apiKey": "ask_new",
            "agentId": "",
        }

    def test_save_leaves_no_temp_files(self, isolated_env):
        CredentialStore().save(CredentialRecord(api_key="ask_abc"))
        assert [p.name for p in isolated_env.iterdir()] == ["config.json"]

    def test_clear_keeps_file_by_default(self, isolated_env):
        store = CredentialStore()
        store.save(CredentialRecord(api_key="ask_abc"))
        store.clear()
        assert store.cached is None
        assert (isolated_env / "config.json").exists()

    def test_clear_delete_file(self, isolated_env):
        store = CredentialStore()
        store.save(CredentialRecord(api_key="ask_abc"))
        store.clear(delete_file=True)
        assert not (isolated_env / "config.json").exists()

    def test_clear_delete_missing_file_is_noop(self):
        CredentialStore().clear(delete_file=True)
