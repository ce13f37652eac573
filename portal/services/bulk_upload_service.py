"""Bulk candidate import via Excel upload."""

import os
from typing import BinaryIO

import requests

from portal.models import BulkUploadHistory, BulkUploadResponse, BulkUploadStatus
from portal.services.base import BaseService, parse_model

MAX_UPLOAD_BYTES = 10 * 1024 * 1024
ALLOWED_EXTENSIONS = (".xlsx", ".xls")
XLSX_CONTENT_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"


def validate_upload(filename: str, size: int) -> str:
    """Return an error message for an unacceptable file, or '' when it is fine."""
    if not filename:
        return "Please choose a file to upload"
    ext = os.path.splitext(filename)[1].lower()
    if ext not in ALLOWED_EXTENSIONS:
        return f"Only {', '.join(ALLOWED_EXTENSIONS)} files are accepted"
    if size > MAX_UPLOAD_BYTES:
        return "File is larger than 10 MB"
    if size == 0:
        return "File is empty"
    return ""


class BulkUploadService(BaseService):

    def upload_excel(self, filename: str, stream: BinaryIO, content_type: str) -> BulkUploadResponse:
        files = {"file": (filename, stream, content_type or XLSX_CONTENT_TYPE)}
        return parse_model(BulkUploadResponse, self.client.post("/bulkupload/upload-excel", files=files))

    def get_status(self, upload_id: str) -> BulkUploadStatus:
        return parse_model(BulkUploadStatus, self.client.get(f"/bulkupload/status/{upload_id}"))

    def get_history(self, page_number: int = 1, page_size: int = 10) -> BulkUploadHistory:
        params = {"pageNumber": page_number, "pageSize": page_size}
        return parse_model(BulkUploadHistory, self.client.get("/bulkupload/all", params=params))

    def download_template(self) -> requests.Response:
        """Raw xlsx response; the caller streams it back to the browser."""
        return self.client.get("/bulkupload/template", raw=True)
