from supabase import create_client, Client
from pulse.config import Config

url: str = Config.SUPABASE_URL
key: str = Config.SUPABASE_KEY
mock_db: str = Config.MOCK_DB

if mock_db == "true":
    from pulse.mock_supabase import MockSupabaseClient
    supabase = MockSupabaseClient()
elif url and key:
    supabase: Client = create_client(url, key)
else:
    supabase = None
