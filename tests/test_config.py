from msgrelay.config import DEFAULT_PORT, Settings


def test_defaults():
    settings = Settings.from_env({})
    assert settings.port == DEFAULT_PORT
    assert settings.address is None
    assert settings.reset_interval is None
    assert not settings.keepalive_enabled
    assert settings.idle_check_interval is None
    assert settings.cors_origins == ["*"]


def test_reads_environment():
    settings = Settings.from_env(
        {
            "PORT": "8080",
            "ADDRESS": "https://relay.example.com/",
            "PING_INTERVAL_SECONDS": "600",
            "RESET_INTERVAL_SECONDS": "3600",
            "SUBSCRIBER_QUEUE_MAX_SIZE": "10",
            "CORS_ORIGINS": "http://a.test, http://b.test",
        }
    )
    assert settings.port == 8080
    assert settings.address == "https://relay.example.com"
    assert settings.keepalive_enabled
    assert settings.reset_interval == 3600
    assert settings.idle_check_interval == 600
    assert settings.subscriber_queue_max_size == 10
    assert settings.cors_origins == ["http://a.test", "http://b.test"]


def test_idle_check_falls_back_to_reset_interval():
    settings = Settings.from_env({"RESET_INTERVAL_SECONDS": "30"})
    assert settings.idle_check_interval == 30
    assert not settings.keepalive_enabled


def test_invalid_values_fall_back():
    settings = Settings.from_env(
        {"PORT": "eighty", "PING_INTERVAL_SECONDS": "soon", "RESET_INTERVAL_SECONDS": "-5"}
    )
    assert settings.port == DEFAULT_PORT
    assert settings.ping_interval is None
    assert settings.reset_interval is None
