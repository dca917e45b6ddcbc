import pytest

from mbbs.services.permission import grant_permissions

HIDDEN = "intro\n> ![^mbbs_reply_visible_tag^](x.png)\n> secret"


async def _register(client, name):
	resp = await client.post('/api/v1/users/', json={"username": name, "email": f"{name}@example.com"})
	assert resp.status_code == 201
	body = resp.json()
	return body, {"Authorization": f"Bearer {body['token']}"}


async def _grant(db_session, group_id, *names):
	await grant_permissions(db_session, group_id, *names)
	await db_session.commit()


@pytest.mark.asyncio
@pytest.mark.integration
async def test_create_thread_requires_login_and_permission(client, db_session):
	resp = await client.post('/api/v1/threads/', json={"title": "t"})
	assert resp.status_code == 401
	_, headers = await _register(client, "writer")
	resp = await client.post('/api/v1/threads/', json={"title": "t"}, headers=headers)
	assert resp.status_code == 403
	assert "thread.create" in resp.json()['detail']


@pytest.mark.asyncio
@pytest.mark.integration
async def test_thread_detail_and_list(client, db_session):
	author, headers = await _register(client, "author")
	await _grant(db_session, 10, "thread.create", "thread.like", "thread.reply", "thread.viewPosts")
	resp = await client.post('/api/v1/threads/', json={"title": "hello", "content": "<p>hi</p>"}, headers=headers)
	assert resp.status_code == 201
	created = resp.json()
	assert created['content'] == "<p>hi</p>"
	assert created['user']['id'] == author['id']
	assert created['can_reply'] is True

	detail = await client.get(f"/api/v1/threads/{created['id']}")
	assert detail.status_code == 200
	body = detail.json()
	assert body['view_count'] == 1
	assert body['can_reply'] is False
	assert body['is_liked'] is False

	listed = await client.get('/api/v1/threads/', headers=headers)
	assert listed.status_code == 200
	assert [t['id'] for t in listed.json()] == [created['id']]


@pytest.mark.asyncio
@pytest.mark.integration
async def test_unknown_and_invisible_threads_are_404(client, db_session):
	assert (await client.get('/api/v1/threads/999999')).status_code == 404
	_, headers = await _register(client, "drafter")
	await _grant(db_session, 10, "thread.create")
	draft = (await client.post('/api/v1/threads/', json={"title": "d", "is_draft": True}, headers=headers)).json()
	assert (await client.get(f"/api/v1/threads/{draft['id']}")).status_code == 404
	assert (await client.get(f"/api/v1/threads/{draft['id']}", headers=headers)).status_code == 200
	assert (await client.get('/api/v1/threads/')).json() == []


@pytest.mark.asyncio
@pytest.mark.integration
async def test_reply_reveals_hidden_content(client, db_session):
	_, author_h = await _register(client, "hider")
	_, reader_h = await _register(client, "reader")
	await _grant(db_session, 10, "thread.create", "thread.createHiddenContent", "thread.reply", "thread.viewPosts")
	thread = (await client.post('/api/v1/threads/', json={"title": "h", "content": HIDDEN}, headers=author_h)).json()
	assert thread['content'] == HIDDEN

	before = (await client.get(f"/api/v1/threads/{thread['id']}", headers=reader_h)).json()
	assert "secret" not in before['content']
	assert "评论后可见" in before['content']

	reply = await client.post(f"/api/v1/threads/{thread['id']}/posts", json={"content": "thanks"}, headers=reader_h)
	assert reply.status_code == 201
	after = (await client.get(f"/api/v1/threads/{thread['id']}", headers=reader_h)).json()
	assert after['content'] == HIDDEN
	assert after['post_count'] == 2
	assert after['reply_count'] == 1

	posts = await client.get(f"/api/v1/threads/{thread['id']}/posts", headers=reader_h)
	assert posts.status_code == 200
	assert [p['content'] for p in posts.json()] == [HIDDEN, "thanks"]


@pytest.mark.asyncio
@pytest.mark.integration
async def test_like_edit_and_delete(client, db_session):
	_, headers = await _register(client, "owner")
	await _grant(db_session, 10, "thread.create", "thread.like", "thread.editOwnThread", "thread.hideOwnThread")
	thread = (await client.post('/api/v1/threads/', json={"title": "t", "content": "a"}, headers=headers)).json()

	like = await client.post(f"/api/v1/threads/{thread['id']}/like", headers=headers)
	assert like.json() == {"liked": True, "like_count": 1}
	again = await client.post(f"/api/v1/threads/{thread['id']}/like", headers=headers)
	assert again.json() == {"liked": False, "like_count": 1}
	assert (await client.get(f"/api/v1/threads/{thread['id']}", headers=headers)).json()['is_liked'] is True

	edited = await client.patch(f"/api/v1/threads/{thread['id']}", json={"title": "t2", "content": "b"}, headers=headers)
	assert edited.status_code == 200
	assert edited.json()['title'] == "t2"
	assert edited.json()['content'] == "b"

	deleted = await client.delete(f"/api/v1/threads/{thread['id']}", headers=headers)
	assert deleted.status_code == 204
	assert (await client.get(f"/api/v1/threads/{thread['id']}", headers=headers)).status_code == 404


@pytest.mark.asyncio
@pytest.mark.integration
async def test_refused_edit_does_not_leak_into_later_reads(client, db_session):
	_, headers = await _register(client, "unpublisher")
	await _grant(db_session, 10, "thread.create", "thread.editOwnThread")
	thread = (await client.post('/api/v1/threads/', json={"title": "orig", "content": "a"}, headers=headers)).json()

	refused = await client.patch(f"/api/v1/threads/{thread['id']}", json={"title": "leaked", "is_draft": True}, headers=headers)
	assert refused.status_code == 403
	assert "thread.unpublish" in refused.json()['detail']

	for _ in range(2):
		detail = await client.get(f"/api/v1/threads/{thread['id']}", headers=headers)
		assert detail.status_code == 200
		assert detail.json()['title'] == "orig"


@pytest.mark.asyncio
@pytest.mark.integration
async def test_moderation_and_closed_threads(client, db_session):
	from mbbs.repositories import user as user_repo
	_, headers = await _register(client, "member")
	admin = await user_repo.create(db_session, username="root", email="root@example.com", group_id=1, token="admintoken")
	await _grant(db_session, 10, "thread.create", "thread.reply")
	admin_h = {"Authorization": "Bearer admintoken"}
	assert admin.id
	thread = (await client.post('/api/v1/threads/', json={"title": "t"}, headers=headers)).json()

	denied = await client.patch(f"/api/v1/threads/{thread['id']}/moderation", json={"is_sticky": True}, headers=headers)
	assert denied.status_code == 403
	moderated = await client.patch(
		f"/api/v1/threads/{thread['id']}/moderation", json={"is_sticky": True, "disable_post": True}, headers=admin_h
	)
	assert moderated.status_code == 200
	assert moderated.json()['is_sticky'] is True

	closed = await client.post(f"/api/v1/threads/{thread['id']}/posts", json={"content": "late"}, headers=headers)
	assert closed.status_code == 403


@pytest.mark.asyncio
@pytest.mark.integration
async def test_user_thread_counts(client, db_session):
	user, headers = await _register(client, "counter")
	await _grant(db_session, 10, "thread.create")
	for i in range(2):
		await client.post('/api/v1/threads/', json={"title": f"t{i}"}, headers=headers)
	await client.post('/api/v1/threads/', json={"title": "draft", "is_draft": True}, headers=headers)
	resp = await client.get(f"/api/v1/threads/stats/users/{user['id']}")
	assert resp.status_code == 200
	assert resp.json() == {"user_id": user['id'], "today": 2, "in_range": None}
	profile = (await client.get(f"/api/v1/users/{user['id']}")).json()
	assert profile['thread_count'] == 2
