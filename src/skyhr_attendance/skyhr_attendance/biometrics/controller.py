from __future__ import annotations

from flask import Flask, request

from ..common.web import login_required
from ..container import Container
from ..core.exceptions import AuthorizationError, ValidationError
from ..core.http import success_response
from ..members.model import Identity
from .service import ALLOWED_IMAGE_TYPES


def register(app: Flask, container: Container) -> None:
    biometrics = container.biometrics_service
    membership = container.membership_service

    def require_own_org_admin(identity: Identity, organization_id: str) -> None:
        membership.require_admin(identity)
        if organization_id != identity.organization_id:
            raise AuthorizationError("Organization does not match the active organization")

    @app.route("/biometrics/organization/index-face", methods=["POST"], endpoint="biometrics_index_face")
    @login_required
    def index_face(identity: Identity):
        membership.require_member(identity)
        image = request.files.get("image")
        if not image:
            raise ValidationError("Image is required")
        content_type = image.mimetype or "image/jpeg"
        if content_type not in ALLOWED_IMAGE_TYPES:
            raise ValidationError(f"Image must be one of: {', '.join(ALLOWED_IMAGE_TYPES)}")

        face_id, stored = biometrics.enroll_face(identity, image.read(), content_type)
        return success_response(
            "Face indexing completed",
            {"face_id": face_id, "user_id": identity.user_id, "image_url": stored.url},
            status=201,
        )

    @app.route(
        "/organizations/<organization_id>/face-collection",
        methods=["POST"],
        endpoint="organizations_create_face_collection",
    )
    @login_required
    def create_face_collection(organization_id: str, identity: Identity):
        require_own_org_admin(identity, organization_id)
        collection_id = biometrics.create_collection(organization_id)
        return success_response("Face collection created", {"collection_id": collection_id}, status=201)

    @app.route(
        "/organizations/<organization_id>/face-collection",
        methods=["DELETE"],
        endpoint="organizations_delete_face_collection",
    )
    @login_required
    def delete_face_collection(organization_id: str, identity: Identity):
        require_own_org_admin(identity, organization_id)
        collection_id = biometrics.delete_collection(organization_id)
        return success_response("Face collection deleted", {"collection_id": collection_id})
