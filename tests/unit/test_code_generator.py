"""
Unit tests for contingent code and public id generation.
"""
from portal.code_generator import CODE_ALPHABET, generate_contingent_code, generate_short_id


class TestContingentCode:

    def test_format(self):
        code = generate_contingent_code()
        prefix, body = code.split('-')
        assert prefix == 'CC'
        assert len(body) == 5

    def test_uses_unambiguous_characters(self):
        for _ in range(50):
            body = generate_contingent_code().split('-')[1]
            assert all(c in CODE_ALPHABET for c in body)
        for c in 'O0I1L':
            assert c not in CODE_ALPHABET

    def test_custom_prefix_and_length(self):
        code = generate_contingent_code(prefix='FEST', length=8)
        assert code.startswith('FEST-')
        assert len(code) == len('FEST-') + 8

    def test_no_prefix(self):
        assert '-' not in generate_contingent_code(prefix='')


class TestShortId:

    def test_prefixed(self):
        short = generate_short_id('reg_')
        assert short.startswith('reg_')
        assert len(short) == len('reg_') + 12

    def test_unique(self):
        ids = {generate_short_id() for _ in range(100)}
        assert len(ids) == 100
