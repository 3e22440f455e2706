import json

from hpvqpcr.config import DEFAULT_CONFIG, get_config, load_config, save_config


class TestConfig:
    def test_defaults(self):
        config = get_config()
        assert config["QC_THRESHOLDS"]["POS_CT_THRESHOLD"] == 35.0
        assert config["QC_THRESHOLDS"]["IC_CT_THRESHOLD"] == 35.0
        assert config["STRICT_QC"] is False

    def test_partial_override_keeps_other_defaults(self):
        config = get_config({"QC_THRESHOLDS": {"IC_CT_THRESHOLD": 33.0}})
        assert config["QC_THRESHOLDS"]["IC_CT_THRESHOLD"] == 33.0
        assert config["QC_THRESHOLDS"]["POS_CT_THRESHOLD"] == 35.0

    def test_get_config_does_not_mutate_defaults(self):
        config = get_config()
        config["QC_THRESHOLDS"]["POS_CT_THRESHOLD"] = 1.0
        assert DEFAULT_CONFIG["QC_THRESHOLDS"]["POS_CT_THRESHOLD"] == 35.0

    def test_load_missing_file_returns_defaults(self, tmp_path):
        assert load_config(str(tmp_path / "missing.json")) == get_config()

    def test_load_invalid_json_returns_defaults(self, tmp_path):
        path = tmp_path / "bad.json"
        path.write_text("{not json")
        assert load_config(str(path)) == get_config()

    def test_save_and_load_round_trip(self, tmp_path):
        path = str(tmp_path / "config.json")
        assert save_config({"STRICT_QC": True}, path)
        with open(path) as f:
            assert json.load(f) == {"STRICT_QC": True}
        assert load_config(path)["STRICT_QC"] is True
