from ldglob._namespace import is_container, parse_link_header

LDP = "http://www.w3.org/ns/ldp#"


def test_parse_single_link():
    assert parse_link_header('<https://x/a>; rel="next"') == [("https://x/a", {"rel": "next"})]


def test_parse_several_links_and_params():
    header = f'<{LDP}BasicContainer>; rel="type", <{LDP}Resource>; rel=type; title="a, b"'
    links = parse_link_header(header)
    assert [target for target, _ in links] == [LDP + "BasicContainer", LDP + "Resource"]
    assert links[1][1] == {"rel": "type", "title": "a, b"}


def test_parse_empty():
    assert parse_link_header(None) == []
    assert parse_link_header("") == []


def test_container_detection():
    assert is_container(f'<{LDP}BasicContainer>; rel="type"')
    assert is_container(f'<{LDP}Container>; rel="type"')
    assert is_container(f'<{LDP}Resource>; rel="type", <{LDP}BasicContainer>; rel="type"')


def test_container_requires_type_relation():
    assert not is_container(f'<{LDP}BasicContainer>; rel="describedby"')
    assert not is_container(f'<{LDP}Resource>; rel="type"')
    assert not is_container(None)


def test_rel_may_list_several_relations():
    assert is_container(f'<{LDP}BasicContainer>; rel="type profile"')
