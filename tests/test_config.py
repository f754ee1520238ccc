from review_app.core.config import DEFAULT_DB_PATH, load_storage_settings


def test_defaults_without_secrets_or_env():
    settings = load_storage_settings({}, env={})
    assert settings.backend == "sqlite"
    assert settings.db_path == DEFAULT_DB_PATH
    assert settings.github_token is None
    assert settings.request_timeout == 15.0


def test_secrets_sections_take_precedence_over_env():
    secrets = {
        "storage": {"STORAGE_BACKEND": "GitHub"},
        "github": {"GITHUB_OWNER": "studio", "GITHUB_REPO": "reviews", "GITHUB_TOKEN": "abc"},
    }
    env = {"REVIEW_GITHUB_OWNER": "someone-else", "REVIEW_GITHUB_BRANCH": "data", "REVIEW_REQUEST_TIMEOUT": "30"}
    settings = load_storage_settings(secrets, env=env)
    assert settings.backend == "github"
    assert settings.github_owner == "studio"
    assert settings.github_repo == "reviews"
    assert settings.github_token == "abc"
    assert settings.github_branch == "data"
    assert settings.request_timeout == 30.0


def test_unknown_backend_and_bad_timeout_fall_back():
    env = {"REVIEW_STORAGE_BACKEND": "postgres", "REVIEW_REQUEST_TIMEOUT": "soon", "REVIEW_DB_PATH": "/tmp/r.db"}
    settings = load_storage_settings(None, env=env)
    assert settings.backend == "sqlite"
    assert settings.request_timeout == 15.0
    assert settings.db_path == "/tmp/r.db"
