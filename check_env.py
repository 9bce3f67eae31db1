import os
from dotenv import load_dotenv

load_dotenv()

key = os.getenv("SUPABASE_KEY") or ""

print("Portfolio API configuration:")
print(f"SUPABASE_URL: {os.getenv('SUPABASE_URL')}")
print(f"SUPABASE_KEY: {key[:10]}...")  # prefix only
print(f"SUPER_ADMIN_USER_ID: {os.getenv('SUPER_ADMIN_USER_ID')}")
print(f"STORAGE_BUCKET: {os.getenv('STORAGE_BUCKET', 'project_images')}")
