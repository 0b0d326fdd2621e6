# TaskBoard: three-column task board with drag-and-drop reconciliation
#
# Components:
#   schema.py  - Data model (Task, TaskStatus, drop targets, drag state)
#   store.py   - SQLite persistence layer
#   server.py  - Flask JSON API over the store
#   client.py  - requests-based HTTP client for the API
#   board.py   - Local task list + drag reconciliation state machine
#   events.py  - Event bus the board notifies a UI through
#   config.py  - Settings (YAML + env) and logging setup
#   seed.py    - Sample-data loader
