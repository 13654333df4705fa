from config import Settings


def test_defaults():
    s = Settings.from_env({})
    assert s.port == 3001
    assert s.host == "127.0.0.1"
    assert s.cors_origins == ["http://localhost:3000"]
    assert s.max_content_length == 256 * 1024
    assert s.secret_key


def test_reads_environment():
    s = Settings.from_env({
        "PORT": "8080",
        "DATABASE_PATH": "/tmp/viz.db",
        "LOG_LEVEL": "DEBUG",
        "CORS_ORIGINS": "https://a.example, https://b.example,",
        "MAX_SESSIONS": "8",
        "SECRET_KEY": "abc",
    })
    assert s.port == 8080
    assert s.database_path == "/tmp/viz.db"
    assert s.log_level == "DEBUG"
    assert s.cors_origins == ["https://a.example", "https://b.example"]
    assert s.flask_config()["SECRET_KEY"] == "abc"
    assert s.max_sessions == 8


def test_oversized_body_is_rejected(tmp_path):
    from main import create_app

    app = create_app(Settings(database_path=str(tmp_path / "x.db"), max_content_length=64))
    res = app.test_client().post("/api/visualizations", json={"algorithm": "merge", "array": list(range(50)), "steps": []})
    assert res.status_code == 413
