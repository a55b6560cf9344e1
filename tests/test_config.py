import os

from mdpage_lib.config import ConfigService, font_dirs_from, number_setting


def test_missing_file_is_created_with_defaults(tmp_path):
    path = tmp_path / "sub" / "mdpage.cfg"
    settings = ConfigService(str(path)).get_settings()
    assert path.exists()
    assert settings["Page"] == {"dpi": "96", "page_format": "letter", "padding": "5"}
    assert settings["Colors"]["highlight"] == "#F5A623"
    assert settings["Fonts"]["family"] == "Inter"


def test_file_overrides_defaults(tmp_path):
    path = tmp_path / "mdpage.cfg"
    path.write_text("[Page]\ndpi = 150\n\n[Colors]\nlink = #000080\n")
    settings = ConfigService(str(path)).get_settings()
    assert settings["Page"]["dpi"] == "150"
    assert settings["Page"]["page_format"] == "letter"
    assert settings["Colors"]["link"] == "#000080"


def test_unreadable_file_falls_back_to_defaults(tmp_path):
    path = tmp_path / "mdpage.cfg"
    path.write_text("not an ini file")
    settings = ConfigService(str(path)).get_settings()
    assert settings["Page"]["dpi"] == "96"


def test_save_and_reload(tmp_path):
    service = ConfigService(str(tmp_path / "mdpage.cfg"))
    settings = service.get_settings()
    settings["Page"]["page_format"] = "a4"
    service.save_settings(settings)
    assert service.get_settings()["Page"]["page_format"] == "a4"


def test_font_dirs_are_split():
    settings = {"Fonts": {"font_dirs": f"/a, /b{os.pathsep}/c,,"}}
    assert font_dirs_from(settings) == ["/a", "/b", "/c"]
    assert font_dirs_from({}) == []


def test_number_setting_fallbacks():
    settings = {"Page": {"dpi": "abc", "padding": "-1", "zoom": "1.5"}}
    assert number_setting(settings, "Page", "dpi", 96) == 96
    assert number_setting(settings, "Page", "padding", 5) == 5
    assert number_setting(settings, "Page", "zoom", 1) == 1.5
    assert number_setting(settings, "Page", "missing", 7) == 7


def test_number_setting_zero_only_when_allowed():
    settings = {"Page": {"dpi": "0", "padding": "0"}}
    assert number_setting(settings, "Page", "dpi", 96) == 96
    assert number_setting(settings, "Page", "padding", 5, allow_zero=True) == 0
    assert number_setting({"Page": {"padding": "-2"}}, "Page", "padding", 5, allow_zero=True) == 5
