import pytest


@pytest.mark.asyncio
@pytest.mark.smoke
async def test_smoke_user_thread(client, db_session):
    from mbbs.services.permission import grant_permissions

    # Root
    r_root = await client.get('/')
    assert r_root.status_code == 200
    # Create user
    payload = {"username": "smoke", "email": "smoke@example.com"}
    r_user = await client.post('/api/v1/users/', json=payload)
    assert r_user.status_code == 201
    headers = {"Authorization": f"Bearer {r_user.json()['token']}"}
    await grant_permissions(db_session, 10, "thread.create", "thread.reply")
    await db_session.commit()
    # Create thread
    r_thread = await client.post('/api/v1/threads/', json={"title": "smoke-thread", "content": "<p>hi</p>"},
                                 headers=headers)
    assert r_thread.status_code == 201
    # Reply
    r_post = await client.post(f"/api/v1/threads/{r_thread.json()['id']}/posts", json={"content": "re"},
                               headers=headers)
    assert r_post.status_code == 201
    # List threads
    r_threads = await client.get('/api/v1/threads/')
    assert r_threads.status_code == 200
    assert any(t['id'] == r_thread.json()['id'] for t in r_threads.json())
