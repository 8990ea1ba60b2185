# tests/v1/test_questions.py
"""Tests for question endpoints."""

from fastapi import status

NEW_QUESTION = {
    "title": "How do context managers work?",
    "content": "What happens when a with block exits with an exception?",
    "tags": ["Python", "context-managers"],
}


def test_create_question(client, author_headers, author) -> None:
    response = client.post("/api/v1/questions/", json=NEW_QUESTION, headers=author_headers)
    assert response.status_code == status.HTTP_201_CREATED
    data = response.json()
    assert data["author_id"] == author.id
    assert data["tags"] == ["context-managers", "python"]
    assert data["votes"] == 0
    assert data["answers"] == []

    tag = client.get("/api/v1/tags/python").json()
    assert tag["count"] == 1


def test_create_question_validation(client, author_headers) -> None:
    for override in ({"title": "short"}, {"content": "tiny"}, {"tags": []}, {"tags": list("abcdef")}):
        payload = {**NEW_QUESTION, **override}
        response = client.post("/api/v1/questions/", json=payload, headers=author_headers)
        assert response.status_code == status.HTTP_422_UNPROCESSABLE_CONTENT, override


def test_create_question_requires_auth(client) -> None:
    response = client.post("/api/v1/questions/", json=NEW_QUESTION)
    assert response.status_code == status.HTTP_401_UNAUTHORIZED


def test_get_question_counts_views(client, question, answer) -> None:
    first = client.get(f"/api/v1/questions/{question.id}")
    second = client.get(f"/api/v1/questions/{question.id}")

    assert first.status_code == status.HTTP_200_OK
    assert first.json()["views"] == 1
    assert second.json()["views"] == 2
    assert [a["id"] for a in second.json()["answers"]] == [answer.id]
    assert second.json()["answer_count"] == 1
    assert second.json()["author"]["username"] == "asker"


def test_get_missing_question(client) -> None:
    response = client.get("/api/v1/questions/98765")
    assert response.status_code == status.HTTP_404_NOT_FOUND
    assert response.json() == {"detail": "Question not found"}


def test_list_questions_filters_and_sorting(client, db_session, author, make_question, answer) -> None:
    other = make_question(
        author,
        title="Why is my Rust borrow checker angry?",
        content="The compiler says the value was moved.",
        tags=("rust",),
    )
    other.votes = 3
    db_session.commit()

    listing = client.get("/api/v1/questions/").json()
    assert listing["pagination"] == {"page": 1, "limit": 10, "total": 2}

    by_votes = client.get("/api/v1/questions/", params={"sort": "votes"}).json()
    assert by_votes["items"][0]["id"] == other.id

    tagged = client.get("/api/v1/questions/", params={"tag": "python"}).json()
    assert [q["id"] for q in tagged["items"]] == [answer.question_id]
    assert tagged["items"][0]["answer_count"] == 1

    searched = client.get("/api/v1/questions/", params={"search": "borrow"}).json()
    assert [q["id"] for q in searched["items"]] == [other.id]

    unanswered = client.get("/api/v1/questions/", params={"sort": "unanswered"}).json()
    assert unanswered["pagination"]["total"] == 2


def test_list_questions_paginates(client, author, make_question) -> None:
    for i in range(3):
        make_question(author, title=f"Numbered question title {i}")

    page = client.get("/api/v1/questions/", params={"page": 2, "limit": 2}).json()
    assert page["pagination"] == {"page": 2, "limit": 2, "total": 3}
    assert len(page["items"]) == 1


def test_update_question(client, author_headers, voter_headers, question) -> None:
    body = {
        "title": "How do I reverse a list in Python 3?",
        "content": "I have a list of integers and need it reversed.",
        "tags": ["python3"],
    }
    forbidden = client.put(f"/api/v1/questions/{question.id}", json=body, headers=voter_headers)
    assert forbidden.status_code == status.HTTP_403_FORBIDDEN

    response = client.put(f"/api/v1/questions/{question.id}", json=body, headers=author_headers)
    assert response.status_code == status.HTTP_200_OK
    assert response.json()["tags"] == ["python3"]
    assert client.get("/api/v1/tags/python").json()["count"] == 0


def test_delete_question(client, author_headers, answerer_headers, question, answer) -> None:
    forbidden = client.delete(f"/api/v1/questions/{question.id}", headers=answerer_headers)
    assert forbidden.status_code == status.HTTP_403_FORBIDDEN

    response = client.delete(f"/api/v1/questions/{question.id}", headers=author_headers)
    assert response.status_code == status.HTTP_200_OK
    assert client.get(f"/api/v1/questions/{question.id}").status_code == status.HTTP_404_NOT_FOUND
    assert client.get(f"/api/v1/answers/question/{question.id}").status_code == (
        status.HTTP_404_NOT_FOUND
    )
