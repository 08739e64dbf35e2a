from csrf import generate_csrf_token, validate_csrf_token


def test_generated_token_validates() -> None:
    assert validate_csrf_token(generate_csrf_token())


def test_tampered_or_missing_token_is_rejected() -> None:
    token = generate_csrf_token()
    assert not validate_csrf_token(token[:-2] + "xx")
    assert not validate_csrf_token("")


def test_expired_token_is_rejected() -> None:
    assert not validate_csrf_token(generate_csrf_token(max_age_hours=-1))
