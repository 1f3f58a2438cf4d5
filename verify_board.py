#!/usr/bin/env python3
"""
Quick verification that the charity board works end-to-end.
"""
from charityboard.access import visible_navigation
from charityboard.config import Config
from charityboard.schema import Portal, TaskStatus
from charityboard.stats import charity_summary
from charityboard.workspace import Workspace


def main():
    print("=" * 60)
    print("Charity Board Verification")
    print("=" * 60)

    print("\n[1/6] Opening workspace with seed data...")
    ws = Workspace(Config()).open()
    print(f"✅ {len(ws.store.charities)} charities, {len(ws.store.tasks)} tasks")

    print("\n[2/6] Logging in as charity manager 'ber'...")
    if not ws.login("ber", "123", Portal.CHARITY):
        print("❌ Login failed")
        return
    user = ws.current_user
    print(f"✅ {user.name} ({user.role.value}), {len(user.permissions)} permissions")
    print(f"   Sidebar: {[e.label for e in visible_navigation(user)]}")

    print("\n[3/6] Creating a task...")
    task = ws.create_task("Collect winter clothes", charity_id=user.charity_id,
                          description="Sort donations by size")
    print(f"✅ Task created: {task.id} ({task.status.value})")

    print("\n[4/6] Moving the card across the board...")
    for status in (TaskStatus.IN_PROGRESS, TaskStatus.REVIEW, TaskStatus.APPROVED):
        ws.board.move(task.id, status)
        print(f"   → {status.label}")
    print(f"   Same-column drop moved: {ws.board.move(task.id, TaskStatus.APPROVED)}")

    print("\n[5/6] Commenting and reading the timeline...")
    ws.activity.add_comment(task.id, "All boxes delivered")
    for entry in ws.activity.timeline(task.id):
        print(f"   [{entry.type.value}] {entry.user_name}: {entry.content}")

    print("\n[6/6] Board summary...")
    print(f"   {charity_summary(ws.store, user.charity_id)}")

    ws.close()
    print("\n" + "=" * 60)
    print("✅ ALL CHECKS PASSED")
    print("=" * 60)


if __name__ == "__main__":
    main()
