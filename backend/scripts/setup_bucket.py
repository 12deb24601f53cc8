"""Create the Supabase storage bucket and check that uploads work.

Usage: python scripts/setup_bucket.py

Reads SUPABASE_URL, SUPABASE_SERVICE_KEY and SUPABASE_BUCKET_NAME from the
environment. An existing bucket is switched to public; a new one is
created public with the document size limit. A small text file is then
uploaded and removed again.
"""
import sys
import pathlib
ROOT = pathlib.Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))
import httpx
from grampanchayat.config import settings
from grampanchayat.storage import StorageError, SupabaseStorage
from grampanchayat.utils.uploads import DOCUMENT_MIME_TYPES

IMAGE_MIME_TYPES = ["image/jpeg", "image/png", "image/gif", "image/webp"]


def main() -> int:
    if not (settings.SUPABASE_URL and settings.SUPABASE_SERVICE_KEY):
        print('SUPABASE_URL and SUPABASE_SERVICE_KEY must be set')
        return 1
    storage = SupabaseStorage(settings.SUPABASE_URL, settings.SUPABASE_SERVICE_KEY, settings.SUPABASE_BUCKET_NAME)
    try:
        created = storage.ensure_bucket(
            public=True,
            file_size_limit=settings.MAX_DOCUMENT_SIZE,
            allowed_mime_types=IMAGE_MIME_TYPES + sorted(DOCUMENT_MIME_TYPES) + ["text/plain"],
        )
        print(f"Bucket {storage.bucket} {'created' if created else 'already exists, set to public'}")

        test_path = 'test/setup-check.txt'
        storage.upload(test_path, b'grampanchayat storage check', 'text/plain', upsert=True)
        print(f'Test upload ok: {storage.public_url(test_path)}')
        storage.remove([test_path])
        print('Test file removed')
    except (StorageError, httpx.HTTPError) as e:
        print(f'Storage setup failed: {e}')
        return 1
    return 0


if __name__ == '__main__':
    sys.exit(main())
