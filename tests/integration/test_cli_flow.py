import json
import logging

import pytest

from aitranslate.cli import main
from aitranslate.config import CONFIG_ENV_VAR
from aitranslate.core import backup_path_for
from aitranslate.logger import set_log_mode


@pytest.fixture(autouse=True)
def isolated_environment(monkeypatch, tmp_path):
    monkeypatch.chdir(tmp_path)
    monkeypatch.delenv(CONFIG_ENV_VAR, raising=False)
    for provider in ("OPENAI", "DEEPSEEK", "GEMINI"):
        monkeypatch.delenv(f"{provider}_API_KEY", raising=False)
    yield
    set_log_mode("info")


def read_strings(path):
    return json.loads(path.read_text(encoding="utf-8"))["strings"]


@pytest.mark.integration
def test_translates_and_backs_up(write_catalog, catalog_data, fake_service):
    path = write_catalog(catalog_data)
    original = path.read_bytes()

    assert main([str(path), "-l", "fr,de"], service=fake_service) == 0

    strings = read_strings(path)
    assert strings["Hello"]["localizations"]["fr"]["stringUnit"]["value"] == "Bonjour"
    assert strings["Hello"]["localizations"]["de"]["stringUnit"] == {"state": "translated", "value": "de:Hello"}
    assert strings["%lld items"]["localizations"]["fr"] == catalog_data["strings"]["%lld items"]["localizations"]["fr"]
    assert "Old label" in strings
    assert backup_path_for(path).read_bytes() == original


@pytest.mark.integration
def test_second_run_is_a_no_op(write_catalog, catalog_data, make_service):
    path = write_catalog(catalog_data)
    assert main([str(path), "-l", "fr", "-s"], service=make_service()) == 0
    first = path.read_bytes()

    second = make_service()
    assert main([str(path), "-l", "fr", "-s"], service=second) == 0

    assert second.calls == []
    assert path.read_bytes() == first


@pytest.mark.integration
def test_skip_backup_and_remove_stale(write_catalog, catalog_data, fake_service):
    path = write_catalog(catalog_data)

    assert main([str(path), "-l", "fr", "-s", "-r"], service=fake_service) == 0

    assert "Old label" not in read_strings(path)
    assert not backup_path_for(path).exists()


@pytest.mark.integration
def test_keys_hints_context_and_force(write_catalog, catalog_data, fake_service):
    path = write_catalog(catalog_data)

    code = main([
        str(path), "-l", "fr",
        "-k", "Hello", "-k", "Open **Settings**",
        "-e", "hello",
        "-a", "A photo app.",
        "-f", "-s",
    ], service=fake_service)

    assert code == 0
    assert [text for text, _ in fake_service.calls] == ["Hello", "Open **Settings**"]
    _, hello_request = fake_service.calls[0]
    assert hello_request.context == "A photo app. Greeting on the home screen"
    assert hello_request.hints == {"Hello": "Bonjour"}
    _, settings_request = fake_service.calls[1]
    # Hello was retranslated earlier in the same run
    assert settings_request.hints == {"Hello": "fr:Hello", "Settings": None}
    assert read_strings(path)["Hello"]["localizations"]["fr"]["stringUnit"]["value"] == "fr:Hello"


@pytest.mark.integration
def test_failed_translations_still_save(write_catalog, make_service):
    path = write_catalog({"sourceLanguage": "en", "strings": {"Hello": {}, "Goodbye": {}}})
    service = make_service(fail_on={("Hello", "fr")})

    assert main([str(path), "-l", "fr", "-s"], service=service) == 0

    strings = read_strings(path)
    assert strings["Hello"]["localizations"]["fr"]["stringUnit"] == {"state": "error", "value": ""}
    assert strings["Goodbye"]["localizations"]["fr"]["stringUnit"]["value"] == "fr:Goodbye"


@pytest.mark.integration
def test_missing_catalog_exits_with_error(tmp_path, fake_service, caplog):
    path = tmp_path / "Missing.xcstrings"

    with caplog.at_level(logging.ERROR):
        assert main([str(path), "-l", "fr"], service=fake_service) == 1

    assert not path.exists()
    assert not backup_path_for(path).exists()
    assert "catalog_unreadable" in caplog.text


@pytest.mark.integration
def test_invalid_catalog_is_left_untouched(tmp_path, fake_service):
    path = tmp_path / "Broken.xcstrings"
    path.write_text('{"strings": {}}', encoding="utf-8")

    assert main([str(path), "-l", "fr"], service=fake_service) == 1
    assert path.read_text(encoding="utf-8") == '{"strings": {}}'
    assert not backup_path_for(path).exists()


@pytest.mark.integration
def test_missing_api_key_exits_before_touching_catalog(write_catalog, catalog_data, caplog):
    path = write_catalog(catalog_data)
    original = path.read_bytes()

    with caplog.at_level(logging.ERROR):
        assert main([str(path), "-l", "fr"]) == 1

    assert path.read_bytes() == original
    assert not backup_path_for(path).exists()
    assert "API key not configured" in caplog.text


@pytest.mark.integration
def test_api_key_option_builds_service(write_catalog):
    # Nothing to translate, so no request is sent
    path = write_catalog({"sourceLanguage": "en", "strings": {}})

    assert main([str(path), "-l", "fr", "-o", "sk-test", "-s"]) == 0
    assert read_strings(path) == {}


@pytest.mark.integration
def test_unknown_config_file_exits_with_error(write_catalog, catalog_data, fake_service, tmp_path):
    path = write_catalog(catalog_data)
    code = main([str(path), "-l", "fr", "--config", str(tmp_path / "nope.json")], service=fake_service)
    assert code == 1


@pytest.mark.integration
def test_config_directory_exits_with_error(write_catalog, catalog_data, fake_service, tmp_path):
    path = write_catalog(catalog_data)
    original = path.read_bytes()

    code = main([str(path), "-l", "fr", "--config", str(tmp_path)], service=fake_service)

    assert code == 1
    assert path.read_bytes() == original


@pytest.mark.integration
def test_empty_language_list_exits_with_usage_error(write_catalog, catalog_data, fake_service):
    path = write_catalog(catalog_data)
    assert main([str(path), "-l", " , "], service=fake_service) == 2
    assert fake_service.calls == []


@pytest.mark.integration
def test_languages_are_required(write_catalog, catalog_data):
    path = write_catalog(catalog_data)
    with pytest.raises(SystemExit) as exc_info:
        main([str(path)])
    assert exc_info.value.code == 2


@pytest.mark.integration
def test_verbose_logs_translations(write_catalog, fake_service, caplog):
    path = write_catalog({"sourceLanguage": "en", "strings": {"Hello": {}}})

    with caplog.at_level(logging.DEBUG):
        assert main([str(path), "-l", "fr", "-v", "-s"], service=fake_service) == 0

    assert "[fr] Hello -> fr:Hello" in caplog.text
