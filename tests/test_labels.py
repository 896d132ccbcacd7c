"""라벨 정규화 테스트."""

from observations.config import settings
from observations.utils.labels import display_label, is_dni, is_opaque_id, normalize_key, normalize_login, user_label


class TestNormalizeKey:

    def test_case_accents_and_spacing(self):
        assert normalize_key("  Chancádo  ") == "chancado"
        assert normalize_key("CHANCADO") == normalize_key("chancado")

    def test_inner_whitespace_collapsed(self):
        assert normalize_key("Planta   de  Cal") == "planta de cal"

    def test_empty(self):
        assert normalize_key(None) == ""
        assert normalize_key("") == ""


class TestDisplayLabel:

    def test_capitalizes_words(self):
        assert display_label("planta  de cal") == "Planta De Cal"

    def test_known_acronyms(self):
        assert display_label("CHANCADO cu") == "Chancado Cu"
        assert display_label("equipo epp") == "Equipo EPP"

    def test_tokens_with_digits_unchanged(self):
        assert display_label("zona 3b") == "Zona 3b"

    def test_opaque_id_placeholder(self):
        assert display_label("0f8fad5b-d9cb-469f-a165-70867728950e") == "Usuario 0f8fad5b"


class TestIdentifiers:

    def test_uuid_is_opaque(self):
        assert is_opaque_id("0f8fad5b-d9cb-469f-a165-70867728950e")

    def test_dni_is_not_opaque(self):
        assert not is_opaque_id("12345678")

    def test_names_and_emails_are_not_opaque(self):
        assert not is_opaque_id("Juan Perez")
        assert not is_opaque_id("juan@example.com")


class TestUserLabel:

    def test_prefers_name(self):
        assert user_label("juan perez", "jp@x.com") == "Juan Perez"

    def test_falls_back_to_email_local_part(self):
        assert user_label(None, "jp@x.com") == "jp"

    def test_falls_back_to_id(self):
        assert user_label("", "", "0f8fad5b-d9cb-469f-a165-70867728950e") == "Usuario 0f8fad5b"


class TestNormalizeLogin:

    def test_dni_expands_to_domain(self):
        assert normalize_login(" 12345678 ") == f"12345678@{settings.LOGIN_EMAIL_DOMAIN}"

    def test_email_lowercased(self):
        assert normalize_login(" Ana@Example.COM ") == "ana@example.com"

    def test_short_digit_string_is_not_dni(self):
        assert normalize_login("12345") == "12345"

    def test_is_dni(self):
        assert is_dni(" 44556677 ")
        assert not is_dni("12345")
        assert not is_dni("ana@mina.pe")
        assert not is_dni(None)
