"""Seed a local user (plus one workspace and project) for manual testing."""
import sys

from taskboard import ids
from taskboard.database import create_tables, get_session
from taskboard.models import Project, User, Workspace
from taskboard.routers.auth import get_password_hash

email = sys.argv[1] if len(sys.argv) > 1 else "test@example.com"
password = sys.argv[2] if len(sys.argv) > 2 else "password"

# Create tables if not exist
create_tables()

with get_session() as db:
    existing_user = db.query(User).filter(User.email == email).first()
    if existing_user:
        print("User already exists")
    else:
        user = User(id=ids.generate(), email=email, hashed_password=get_password_hash(password))
        workspace = Workspace(id=ids.generate(), name="Personal", owner_id=user.id)
        project = Project(id=ids.generate(), name="Inbox", workspace_id=workspace.id)
        for row in (user, workspace, project):
            db.add(row)
            db.flush()
        db.commit()
        print(f"Test user created: {email} / {password}")
        print(f"  workspaceId={ids.decode(workspace.id)}")
        print(f"  projectId={ids.decode(project.id)}")
