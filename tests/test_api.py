from fakeso.services.events import Event


def account_body(username="alice", email="alice@fakeso.io", password="hash"):
    return {"username": username, "email": email, "hashedPassword": password}


def question_body(title="How do I sort a list?", tags=("python",), asked_by="alice"):
    return {
        "title": title,
        "text": "Looking for a stable sort.",
        "tags": [{"name": t, "description": ""} for t in tags],
        "askedBy": asked_by,
        "askDateTime": "2024-01-01T12:00:00Z",
    }


def answer_body(text="Use sorted().", ans_by="bob"):
    return {"text": text, "ansBy": ans_by, "ansDateTime": "2024-01-01T13:00:00Z"}


def make_moderator(client, username="mod"):
    client.post("/login/createAccount", json=account_body(username, f"{username}@fakeso.io", "secret"))
    client.put(f"/account/userType/{username}", json={"userType": "moderator"})
    return {"username": username, "hashedPassword": "secret"}


# ═══════════════════════════════════════════════════════════════
#  Login & accounts
# ═══════════════════════════════════════════════════════════════

def test_create_account_login_and_me(client):
    created = client.post("/login/createAccount", json=account_body())
    assert created.status_code == 200
    assert created.json()["userType"] == "user"

    client.cookies.clear()
    assert client.get("/login/me").status_code == 401

    login = client.post("/login/login", json={"username": "alice", "hashedPassword": "hash"})
    assert login.status_code == 200
    me = client.get("/login/me")
    assert me.status_code == 200 and me.json()["username"] == "alice"


def test_login_errors(client):
    client.post("/login/createAccount", json=account_body())
    assert client.post("/login/login", json={"username": "alice", "hashedPassword": "x"}).status_code == 401
    assert client.post("/login/login", json={"username": "bob", "hashedPassword": "x"}).status_code == 404


def test_duplicate_account_is_conflict(client):
    client.post("/login/createAccount", json=account_body())
    response = client.post("/login/createAccount", json=account_body(email="other@fakeso.io"))
    assert response.status_code == 409
    assert "username" in response.json()["detail"]


def test_malformed_body_is_bad_request(client):
    assert client.post("/login/createAccount", json={"username": "alice"}).status_code == 400
    assert client.post("/answer/addAnswer", json={"qid": "not-a-number"}).status_code == 400


def test_account_settings_and_profile(client, publisher):
    client.post("/login/createAccount", json=account_body())

    response = client.put(
        "/account/settings/alice",
        json={"theme": "highContrast", "textSize": "large", "screenReader": True},
    )
    assert response.status_code == 200
    assert response.json()["settings"]["theme"] == "highContrast"

    profile = client.get("/profile/alice").json()
    assert profile["username"] == "alice" and profile["questions"] == []
    assert client.get("/profile/nobody").status_code == 404
    assert publisher.named(Event.USER_UPDATE)


# ═══════════════════════════════════════════════════════════════
#  Questions, answers, comments, tags
# ═══════════════════════════════════════════════════════════════

def test_question_lifecycle(client):
    qid = client.post("/question/addQuestion", json=question_body()).json()["id"]

    listing = client.get("/question/getQuestion", params={"order": "newest", "search": "[python]"})
    assert [q["id"] for q in listing.json()] == [qid]
    assert client.get("/question/getQuestion", params={"askedBy": "nobody"}).json() == []

    viewed = client.get(f"/question/getQuestionById/{qid}", params={"username": "dave"}).json()
    assert viewed["views"] == ["dave"]
    assert viewed["askedBy"] == "alice"

    vote = client.post("/question/upvoteQuestion", json={"qid": qid, "username": "dave"}).json()
    assert vote == {"msg": "Question upvoted successfully", "upVotes": ["dave"], "downVotes": []}
    vote = client.post("/question/downvoteQuestion", json={"qid": qid, "username": "dave"}).json()
    assert vote["upVotes"] == [] and vote["downVotes"] == ["dave"]

    tags = client.get("/tag/getTagsWithQuestionNumber").json()
    assert tags == [{"name": "python", "qcount": 1}]
    assert client.get("/tag/getTagByName/python").json()["name"] == "python"
    assert client.get("/tag/getTagByName/rust").status_code == 404


def test_invalid_question_is_bad_request(client):
    assert client.post("/question/addQuestion", json=question_body(title="")).status_code == 400


def test_answer_and_comment_routes(client, publisher):
    qid = client.post("/question/addQuestion", json=question_body()).json()["id"]

    answer = client.post("/answer/addAnswer", json={"qid": qid, "ans": answer_body()}).json()
    assert answer["ansBy"] == "bob" and answer["isCorrect"] is False

    marked = client.put("/answer/updateCorrectAnswer", json={"qid": qid, "ans": {**answer_body(), "id": answer["id"]}})
    assert marked.json()["isCorrect"] is True

    comment = client.post(
        "/comment/addComment",
        json={
            "id": answer["id"],
            "type": "answer",
            "comment": {"text": "Thanks", "commentBy": "alice", "commentDateTime": "2024-01-01T14:00:00Z"},
        },
    ).json()
    assert client.get(f"/comment/getCommentById/{comment['id']}").json()["text"] == "Thanks"
    assert client.get(f"/answer/getAnswerById/{answer['id']}").json()["comments"][0]["id"] == comment["id"]

    [event] = publisher.named(Event.COMMENT_UPDATE)
    assert event.type == "answer"


def test_missing_answer_is_not_found(client):
    assert client.get("/answer/getAnswerById/999").status_code == 404


# ═══════════════════════════════════════════════════════════════
#  Moderator actions
# ═══════════════════════════════════════════════════════════════

def test_lock_then_answer_is_conflict(client):
    moderator = make_moderator(client)
    qid = client.post("/question/addQuestion", json=question_body()).json()["id"]

    response = client.post(
        "/action/takeAction",
        json={"user": moderator, "actionType": "lock", "postType": "question", "postID": qid},
    )
    assert response.status_code == 200
    assert response.json() == "action completed successfully"

    response = client.post("/answer/addAnswer", json={"qid": qid, "ans": answer_body()})
    assert response.status_code == 409


def test_action_status_codes(client):
    moderator = make_moderator(client)
    client.post("/login/createAccount", json=account_body("joe", "joe@fakeso.io", "pw"))
    qid = client.post("/question/addQuestion", json=question_body()).json()["id"]

    def act(user, action_type, post_type="question", post_id=qid):
        return client.post(
            "/action/takeAction",
            json={"user": user, "actionType": action_type, "postType": post_type, "postID": post_id},
        ).status_code

    assert act(moderator, "promote") == 501
    assert act(moderator, "archive") == 501
    assert act(moderator, "pin", post_type="tag") == 400
    assert act({"username": "joe", "hashedPassword": "pw"}, "pin") == 403
    assert act(moderator, "pin", post_id=999) == 404
    assert act(moderator, "remove") == 200
    assert client.get(f"/question/getQuestionById/{qid}", params={"username": "dave"}).status_code == 404


# ═══════════════════════════════════════════════════════════════
#  Drafts
# ═══════════════════════════════════════════════════════════════

def test_question_draft_routes(client):
    saved = client.post(
        "/question/saveDraft", json={"draft": question_body(title="WIP"), "username": "alice"}
    ).json()
    assert saved["editId"]["title"] == "WIP"
    assert client.get(f"/question/getDraftQuestionById/{saved['id']}").json()["id"] == saved["id"]

    posted = client.post(
        "/question/postFromDraft",
        json={"draftQuestion": question_body(title="Done"), "username": "alice", "draftId": saved["id"]},
    )
    assert posted.status_code == 200
    assert [q["title"] for q in client.get("/question/getQuestion").json()] == ["Done"]
    assert client.get(f"/question/getDraftQuestionById/{saved['id']}").status_code == 404


def test_answer_draft_routes(client):
    qid = client.post("/question/addQuestion", json=question_body()).json()["id"]
    saved = client.post(
        "/answer/saveDraft", json={"draft": answer_body(), "qid": qid, "username": "bob"}
    ).json()
    assert client.get(f"/answer/getDraftAnswerById/{saved['id']}").json()["qid"] == qid

    posted = client.post(
        "/answer/postFromDraft",
        json={"draftAnswer": answer_body(), "qid": qid, "username": "bob", "draftId": saved["id"]},
    ).json()
    question = client.get(f"/question/getQuestionById/{qid}", params={"username": "bob"}).json()
    assert [a["id"] for a in question["answers"]] == [posted["id"]]
