import uuid
import pytest

from ideaboard.repositories import idea as idea_repo

@pytest.mark.asyncio
@pytest.mark.integration
async def test_delete_user(client):
	r = await client.post('/api/v1/users/', json={"email": "del@example.com", "role": "user"})
	uid = r.json()['id']
	d = await client.delete(f'/api/v1/users/{uid}')
	assert d.status_code == 204
	# verify gone
	again = await client.delete(f'/api/v1/users/{uid}')
	assert again.status_code == 404

@pytest.mark.asyncio
@pytest.mark.integration
async def test_delete_user_removes_their_ideas(client, make_user, db_session):
	uid, headers = await make_user("leaving@example.com")
	created = await client.post('/api/v1/ideas/', json={"content": {"title": "t", "description": "d"}}, headers=headers)
	assert created.status_code == 201
	d = await client.delete(f'/api/v1/users/{uid}')
	assert d.status_code == 204
	# the deleted user is no longer a valid requester
	listed = await client.get('/api/v1/ideas/', headers=headers)
	assert listed.status_code == 401
	remaining, total = await idea_repo.list_for_owner(db_session, uuid.UUID(uid))
	assert total == 0 and remaining == []

@pytest.mark.asyncio
@pytest.mark.integration
async def test_delete_user_not_found(client):
	random_id = str(uuid.uuid4())
	resp = await client.delete(f'/api/v1/users/{random_id}')
	assert resp.status_code == 404
