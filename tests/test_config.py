"""
WordBank Backend — Settings Tests
===================================

What:  Tests for Settings validators and the remote-configuration check.
How:   Settings are built with explicit values and _env_file=None so a local
       .env never leaks into the results.
"""

import pydantic
import pytest

from wordbank.config import Settings
from wordbank.exceptions import ConfigMissingError


def make_settings(**overrides):
    values = {"repo_owner": "owner", "repo_name": "repo", "github_token": "tok"}
    values.update(overrides)
    return Settings(_env_file=None, **values)


class TestSettings:

    def test_defaults(self):
        config = make_settings()
        assert config.document_path == "correctAnswers.json"
        assert config.image_dir == "imgs"
        assert config.github_branch is None
        assert config.cors_origins_list == ["*"]

    def test_repository_paths_lose_slashes(self):
        config = make_settings(document_path="/data/answers.json", image_dir="/imgs/")
        assert config.document_path == "data/answers.json"
        assert config.image_dir == "imgs"

    def test_empty_image_dir_rejected(self):
        with pytest.raises(pydantic.ValidationError):
            make_settings(image_dir="/")

    def test_log_level_normalized(self):
        assert make_settings(log_level="debug").log_level == "DEBUG"

    def test_invalid_log_level_rejected(self):
        with pytest.raises(pydantic.ValidationError):
            make_settings(log_level="chatty")

    def test_cors_origins_split(self):
        config = make_settings(cors_origins="https://a.example, https://b.example,")
        assert config.cors_origins_list == ["https://a.example", "https://b.example"]


class TestRemoteSettings:

    def test_complete(self):
        config = make_settings()
        assert config.missing_remote_settings() == []
        config.validate_remote()

    def test_blank_values_count_as_missing(self):
        config = make_settings(repo_name="  ", github_token="")
        with pytest.raises(ConfigMissingError) as exc_info:
            config.validate_remote()
        assert exc_info.value.missing == ["REPO_NAME", "GITHUB_TOKEN"]
        assert exc_info.value.status_code == 500
