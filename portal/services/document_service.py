"""Candidate document endpoints. Results arrive wrapped in a {data} envelope."""

from typing import BinaryIO, List, Optional

from portal.models import CandidateDocument, DocumentStatus
from portal.services.base import ApiResponseError, BaseService, parse_list, parse_model, unwrap


class DocumentService(BaseService):

    def upload_document(
        self,
        candidate_id: str,
        document_type: str,
        filename: str,
        stream: BinaryIO,
        content_type: str,
        is_required: bool = False,
    ) -> CandidateDocument:
        form = {
            "candidateId": candidate_id,
            "documentType": document_type,
            "isRequired": "true" if is_required else "false",
        }
        files = {"file": (filename, stream, content_type)}
        payload = self.client.post("/document/upload", data=form, files=files)
        return parse_model(CandidateDocument, unwrap(payload))

    def verify_document(
        self, document_id: str, status: DocumentStatus, comments: Optional[str] = None
    ) -> CandidateDocument:
        body = {"documentId": document_id, "statusId": int(status), "comments": comments}
        return parse_model(CandidateDocument, unwrap(self.client.post("/document/verify", json=body)))

    def get_candidate_documents(self, candidate_id: str) -> List[CandidateDocument]:
        return parse_list(CandidateDocument, unwrap(self.client.get(f"/document/candidate/{candidate_id}")))

    def get_pending_verification(self) -> List[CandidateDocument]:
        return parse_list(CandidateDocument, unwrap(self.client.get("/document/pending-verification")))

    def delete_document(self, document_id: str) -> None:
        self.client.delete(f"/document/{document_id}")

    def has_required_documents(self, candidate_id: str) -> bool:
        payload = self.client.get(f"/document/has-required/{candidate_id}")
        if not isinstance(payload, dict) or "hasRequired" not in payload:
            raise ApiResponseError("has-required response is missing 'hasRequired'")
        return bool(payload["hasRequired"])
