"""Tests for shared schema validators."""
import pytest

from core.config import Settings
from schemas.validators import (
    normalize_recipients,
    parse_tag_list,
    serialize_tag_list,
    validate_absolute_url,
    validate_description_length,
    validate_folder_name,
    validate_hex_color,
    validate_tag_name,
    validate_title,
)


class TestTagList:
    """Tests for comma-separated tag list parsing."""

    def test__parse_tag_list__trims_and_drops_empty_segments(self) -> None:
        assert parse_tag_list(" ai , ,news,, ") == ["ai", "news"]

    def test__parse_tag_list__dedupes_preserving_first_occurrence_and_case(self) -> None:
        assert parse_tag_list(["news", "AI", "news", "ai"]) == ["news", "AI", "ai"]

    def test__parse_tag_list__none_and_empty(self) -> None:
        assert parse_tag_list(None) == []
        assert parse_tag_list("") == []
        assert parse_tag_list("   ") == []

    def test__parse_tag_list__rejects_non_string_items(self) -> None:
        with pytest.raises(ValueError, match="must be strings"):
            parse_tag_list(["ok", 3])  # type: ignore[list-item]

    @pytest.mark.parametrize(
        "tags",
        [[], ["ai"], ["ai", "news"], ["machine learning", "Python", "web-dev"]],
    )
    def test__tag_list__serialize_then_parse_is_identity(self, tags: list[str]) -> None:
        assert parse_tag_list(serialize_tag_list(tags)) == tags

    def test__parse_tag_list__is_idempotent(self) -> None:
        once = parse_tag_list(" b, a ,b,,c ")
        assert parse_tag_list(serialize_tag_list(once)) == once


class TestUrlAndTitle:
    """Tests for bookmark url and title validation."""

    @pytest.mark.parametrize(
        "url", ["https://example.com", "http://localhost:8000/path?q=1", "ftp://files.example.org"],
    )
    def test__validate_absolute_url__accepts_absolute(self, url: str) -> None:
        assert validate_absolute_url(f"  {url} ") == url

    @pytest.mark.parametrize("url", ["example.com", "/relative/path", "https://", "not a url"])
    def test__validate_absolute_url__rejects_relative(self, url: str) -> None:
        with pytest.raises(ValueError, match="Please enter a valid URL"):
            validate_absolute_url(url)

    def test__validate_absolute_url__empty(self) -> None:
        with pytest.raises(ValueError, match="URL is required"):
            validate_absolute_url("   ")

    def test__validate_title__required(self) -> None:
        with pytest.raises(ValueError, match="Title is required"):
            validate_title("  ")

    def test__validate_title__max_length(self) -> None:
        assert validate_title("a" * 500) == "a" * 500
        with pytest.raises(ValueError, match="exceeds maximum length"):
            validate_title("a" * 501)

    def test__validate_description_length__none_becomes_empty(self) -> None:
        assert validate_description_length(None) == ""

    def test__validate_description_length__too_long(self) -> None:
        with pytest.raises(ValueError, match="Description exceeds maximum length"):
            validate_description_length("x" * 2001)


class TestFolderTagAndColor:
    """Tests for folder name, tag name and color validation."""

    def test__validate_folder_name__boundary(self) -> None:
        assert validate_folder_name("r" * 50) == "r" * 50
        with pytest.raises(ValueError, match="maximum length of 50"):
            validate_folder_name("r" * 51)

    def test__validate_folder_name__explicit_settings_limit(self) -> None:
        settings = Settings(_env_file=None, max_folder_name_length=5)
        assert validate_folder_name("short", settings) == "short"
        with pytest.raises(ValueError, match="maximum length of 5"):
            validate_folder_name("longer", settings)

    def test__validate_folder_name__required(self) -> None:
        with pytest.raises(ValueError, match="Folder name is required"):
            validate_folder_name("")

    def test__validate_tag_name__rejects_commas(self) -> None:
        with pytest.raises(ValueError, match="cannot contain commas"):
            validate_tag_name("a,b")

    @pytest.mark.parametrize("color", ["#2563eb", "#FFF", "#a1B2c3"])
    def test__validate_hex_color__valid(self, color: str) -> None:
        assert validate_hex_color(color) == color

    @pytest.mark.parametrize("color", ["2563eb", "#12345", "blue", "#ggg"])
    def test__validate_hex_color__invalid(self, color: str) -> None:
        with pytest.raises(ValueError, match="Invalid color"):
            validate_hex_color(color)


class TestRecipients:
    """Tests for share recipient normalization."""

    def test__normalize_recipients__lowercases_and_dedupes(self) -> None:
        result = normalize_recipients([" Ann@Example.com", "ann@example.com", "", "bo@x.io"])
        assert result == ["ann@example.com", "bo@x.io"]

    def test__normalize_recipients__rejects_invalid(self) -> None:
        with pytest.raises(ValueError, match="Invalid email address: 'not-an-email'"):
            normalize_recipients(["not-an-email"])
