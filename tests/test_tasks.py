def test_ceo_adds_department_and_individual_tasks(client, ceo_headers, dev_headers, developer, designer):
    response = client.post(
        "/api/tasks/add",
        json={"title": "Fix login bug", "assigned_sub_role": "Developer", "specific_user": "all"},
        headers=ceo_headers
    )
    assert response.status_code == 201
    task = response.json()["task"]
    assert task["assigned_user_id"] is None
    assert task["status"] == "Pending"

    response = client.post(
        "/api/tasks/add",
        json={"title": "Refactor API", "assigned_sub_role": "Developer", "specific_user": developer.id},
        headers=ceo_headers
    )
    assert response.json()["task"]["assigned_user_name"] == "Dev One"

    client.post(
        "/api/tasks/add",
        json={"title": "New logo", "assigned_sub_role": "Designer", "specific_user": str(designer.id)},
        headers=ceo_headers
    )

    mine = client.get("/api/tasks/my-tasks", headers=dev_headers).json()
    assert mine["count"] == 2
    assert {t["title"] for t in mine["tasks"]} == {"Fix login bug", "Refactor API"}

    everything = client.get("/api/tasks/all", headers=ceo_headers).json()
    assert everything["count"] == 3


def test_employee_cannot_add_or_list_all(client, dev_headers):
    response = client.post(
        "/api/tasks/add",
        json={"title": "Sneaky", "assigned_sub_role": "Developer"},
        headers=dev_headers
    )
    assert response.status_code == 403
    assert client.get("/api/tasks/all", headers=dev_headers).status_code == 403


def test_invalid_sub_role_rejected(client, ceo_headers):
    response = client.post(
        "/api/tasks/add",
        json={"title": "Unknown", "assigned_sub_role": "Astronaut"},
        headers=ceo_headers
    )
    assert response.status_code == 400


def test_status_update_validates_enum(client, ceo_headers, dev_headers):
    task_id = client.post(
        "/api/tasks/add",
        json={"title": "Write docs", "assigned_sub_role": "Developer"},
        headers=ceo_headers
    ).json()["task"]["id"]

    response = client.put(f"/api/tasks/{task_id}/status", json={"status": "OnHold"}, headers=dev_headers)
    assert response.status_code == 200
    assert response.json()["message"] == "Task marked as OnHold"

    response = client.put(f"/api/tasks/{task_id}/status", json={"status": "Done"}, headers=dev_headers)
    assert response.status_code == 400

    response = client.put("/api/tasks/9999/status", json={"status": "Completed"}, headers=dev_headers)
    assert response.status_code == 404


def test_edit_and_delete(client, ceo_headers, developer):
    task_id = client.post(
        "/api/tasks/add",
        json={"title": "Draft", "assigned_sub_role": "Developer", "specific_user": developer.id},
        headers=ceo_headers
    ).json()["task"]["id"]

    response = client.put(
        f"/api/tasks/{task_id}",
        json={"title": "Final", "assigned_sub_role": "SEO"},
        headers=ceo_headers
    )
    assert response.status_code == 200
    task = response.json()["task"]
    assert task["title"] == "Final"
    assert task["assigned_user_id"] is None
    assert task["assigned_user_name"] == ""

    assert client.delete(f"/api/tasks/{task_id}", headers=ceo_headers).status_code == 200
    assert client.delete(f"/api/tasks/{task_id}", headers=ceo_headers).status_code == 404
