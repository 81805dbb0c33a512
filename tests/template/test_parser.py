"""Тесты для парсера шаблонов TemplateParser."""

from typing import List

import pytest

from vingo.conditions.model import ComparisonCondition
from vingo.errors import VingoUserError
from vingo.template.lexer import TemplateLexer
from vingo.template.nodes import ForNode, IfNode, SwitchNode, TextNode, VariableNode
from vingo.template.parser import ParserError, TemplateParser, parse_template
from vingo.template.tokens import Token


def _parse(text: str):
    return TemplateParser(TemplateLexer().tokenize(text)).parse()


class TestTemplateParser:
    """Основные тесты для TemplateParser."""

    def test_parse_empty_template(self):
        tokens: List[Token] = []
        assert TemplateParser(tokens).parse() == []

    def test_text_and_variables(self):
        ast = _parse('Hello <{ user.name | "guest" }>!')

        assert ast == [
            TextNode("Hello "),
            VariableNode(path="user.name", default="guest"),
            TextNode("!"),
        ]

    def test_if_elseif_else(self):
        ast = _parse("<{if x > 10}>big<{elseif x > 3}>mid<{else}>small<{/if}>")

        assert len(ast) == 1
        node = ast[0]
        assert isinstance(node, IfNode)
        assert [b.condition_text for b in node.branches] == ["x > 10", "x > 3"]
        assert node.branches[0].body == [TextNode("big")]
        assert node.branches[1].body == [TextNode("mid")]
        assert node.else_body == [TextNode("small")]
        assert node.branches[0].condition_ast.first == ComparisonCondition("x", ">", "10")

    def test_if_without_else(self):
        node = _parse("<{if a}>yes<{/if}>")[0]

        assert len(node.branches) == 1
        assert node.else_body is None

    def test_empty_else_body(self):
        node = _parse("<{if a}>yes<{else}><{/if}>")[0]
        assert node.else_body == []

    def test_for_header(self):
        node = _parse("<{for item in user.items}><{item}><{/for}>")[0]

        assert isinstance(node, ForNode)
        assert node.item_var == "item"
        assert node.index_var is None
        assert node.list_expr == "user.items"
        assert node.body == [VariableNode(path="item")]

    def test_for_with_index(self):
        node = _parse("<{for i , v in items}>x<{/for}>")[0]

        assert node.index_var == "i"
        assert node.item_var == "v"
        assert node.list_expr == "items"

    def test_for_splits_at_first_in(self):
        node = _parse("<{for x in in_stock}><{/for}>")[0]
        assert node.item_var == "x"
        assert node.list_expr == "in_stock"

    def test_switch(self):
        node = _parse(
            "<{switch status}>"
            "<{case 1}>one"
            "<{case __switch__ > 10}>many"
            "<{default}>other"
            "<{/switch}>"
        )[0]

        assert isinstance(node, SwitchNode)
        assert node.subject == "status"
        assert [c.condition_text for c in node.cases] == ["1", "__switch__ > 10"]
        assert node.cases[0].condition_ast is None
        assert node.cases[1].condition_ast is not None
        assert node.default_body == [TextNode("other")]

    def test_switch_unlabeled_text_becomes_default(self):
        """Текст между switch и первым case становится телом default"""
        node = _parse("<{switch s}>\n<{case 1}>one<{/switch}>")[0]

        assert len(node.cases) == 1
        assert node.default_body == [TextNode("\n")]

    def test_switch_last_non_empty_default_wins(self):
        node = _parse(
            "<{switch s}><{default}>first<{case 1}>one<{default}>second<{default}><{/switch}>"
        )[0]

        assert node.default_body == [TextNode("second")]
        assert len(node.cases) == 1

    def test_nested_constructs(self):
        ast = _parse(
            "<{for u in users}>"
            "<{if u.active}><{switch u.role}><{case admin}>A<{/switch}><{/if}>"
            "<{/for}>"
        )

        loop = ast[0]
        cond = loop.body[0]
        assert isinstance(cond, IfNode)
        assert isinstance(cond.branches[0].body[0], SwitchNode)

    def test_unknown_tag_is_text_node(self):
        assert _parse("<{frobnicate now}>") == [TextNode("<{frobnicate now}>")]

    def test_parse_template_helper(self):
        tokens = TemplateLexer().tokenize("a")
        assert parse_template(tokens) == [TextNode("a")]


class TestTemplateParserErrors:
    """Структурные ошибки шаблонов."""

    @pytest.mark.parametrize("source, message", [
        ("<{if x}>open", "Unclosed if"),
        ("<{for x in xs}>open", "Unclosed for"),
        ("<{switch s}><{case 1}>", "Unclosed switch"),
        ("<{if a}><{for x in xs}><{/if}>", "Unexpected token inside for"),
        ("text<{/if}>", "Unexpected token at top level"),
        ("<{else}>", "Unexpected token at top level"),
        ("<{case 1}>", "Unexpected token at top level"),
        ("<{for x in xs}><{else}><{/for}>", "Unexpected token inside for"),
        ("<{switch s}><{else}><{/switch}>", "Unexpected token inside switch"),
        ("<{if a}><{/for}>", "Unexpected token inside if"),
        ("<{if a}>1<{else}>2<{else}>3<{/if}>", "Duplicate 'else'"),
        ("<{if a}>1<{else}>2<{elseif b}>3<{/if}>", "'elseif' after 'else'"),
        ("<{for x}>a<{/for}>", "Invalid for tag"),
        ("<{for a b in xs}>a<{/for}>", "Invalid loop variable"),
        ("<{for i, in xs}>a<{/for}>", "Invalid loop variable"),
        ("<{if x >}>a<{/if}>", "Invalid condition"),
        ("<{if a}><{elseif and b}><{/if}>", "Invalid condition"),
        ("<{switch s}><{case __switch__ >}><{/switch}>", "Invalid condition"),
    ])
    def test_errors(self, source, message):
        with pytest.raises(ParserError) as exc:
            _parse(source)
        assert message in str(exc.value)

    def test_unclosed_if_points_to_start(self):
        with pytest.raises(ParserError) as exc:
            _parse("line one\nline two <{if ready}>\n body\n")

        assert exc.value.line == 2
        assert exc.value.index == 1
        assert "Unclosed if at line 2" in str(exc.value)

    def test_parser_error_is_user_error(self):
        with pytest.raises(VingoUserError):
            _parse("<{if a}>")

    def test_malformed_case_without_operator_is_accepted(self):
        """Метка case без оператора — литерал, её синтаксис не проверяется"""
        node = _parse("<{switch s}><{case and}>x<{/switch}>")[0]
        assert node.cases[0].condition_text == "and"
