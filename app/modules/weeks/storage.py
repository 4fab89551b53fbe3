from supabase import Client
from app.config.settings import settings
from typing import List, Optional
from urllib.parse import unquote
import logging

logger = logging.getLogger(__name__)


class WeekFileStorage:
    def __init__(self, supabase: Client, bucket_name: Optional[str] = None):
        self.supabase = supabase
        self.bucket_name = bucket_name or settings.week_files_bucket

    def _bucket(self):
        return self.supabase.storage.from_(self.bucket_name)

    def upload_file(self, file_content: bytes, path: str, content_type: str) -> str:
        """Upload file to the bucket and return its public URL"""
        try:
            self._bucket().upload(
                path,
                file_content,
                file_options={"content-type": content_type}
            )
        except Exception as e:
            logger.error(f"Failed to upload {path} to {self.bucket_name}: {str(e)}")
            raise
        return self._bucket().get_public_url(path)

    def path_from_public_url(self, file_url: str) -> Optional[str]:
        """Object path inside this bucket for a public URL, or None if it points elsewhere"""
        marker = f"/object/public/{self.bucket_name}/"
        if not file_url or marker not in file_url:
            return None
        return unquote(file_url.split(marker, 1)[1].split("?", 1)[0])

    def delete_files(self, paths: List[str]) -> bool:
        """Delete objects from the bucket"""
        if not paths:
            return True
        try:
            self._bucket().remove(paths)
            return True
        except Exception as e:
            logger.warning(f"Failed to delete {len(paths)} file(s) from {self.bucket_name}: {e}")
            return False
