# Charity board: charities, projects, tasks, team and internal mail
#
# Components:
#   schema.py    - Data model (Charity, Project, Task, User, Message, TaskActivity, AppState)
#   seed.py      - Demo records loaded into a new store
#   config.py    - YAML configuration
#   store.py     - In-memory store: mutators, derived reads, change events
#   board.py     - Kanban columns and card moves
#   activity.py  - Task timeline: history, comments, uploads
#   access.py    - Navigation filter, route guard, permission checks
#   auth.py      - Admin and charity portal login
#   describer.py - AI-generated task descriptions
#   stats.py     - Progress, dashboard statistics, mailboxes
#   workspace.py - Per-session container tying it all together
