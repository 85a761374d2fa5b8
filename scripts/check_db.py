from tutorial_hub import config
from tutorial_hub.db import TutorialStore

store = TutorialStore(config.DB_PATH, timeout=config.DB_TIMEOUT)
counts = store.counts()

print("\n TUTORIAL COUNTS:")
print(f"- flat tutorials:      {counts['flat']}")
print(f"- chaptered tutorials: {counts['chaptered']} ({counts['chapters']} chapters)")

print("\n NEWEST FIRST:")
for t in store.list_summaries()[:10]:
    print(f"- {t.id}  {t.title}  [{t.author or '?'}]  {t.total_chapters} ch, {t.read_time or '?'} min")
