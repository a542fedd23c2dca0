"""DynamoDB-backed store for form definitions and submissions."""

import logging
import os
from datetime import UTC, datetime
from typing import Any

import boto3
from boto3.dynamodb.conditions import Key
from botocore.exceptions import ClientError
from ulid import ULID

from models.form import FormDefinition, FormSubmission, Value
from utils.dynamodb_utils import (
    parse_from_dynamodb,
    parse_items_from_dynamodb,
    prepare_for_dynamodb,
)

from .collaborators import CollaboratorError, FormNotFoundError

logger = logging.getLogger(__name__)

ENVIRONMENT = os.environ.get("ENVIRONMENT", "dev")
AWS_REGION = os.environ.get("AWS_REGION_NAME", "us-west-2")


def _is_conditional_failure(error: ClientError) -> bool:
    return error.response["Error"]["Code"] == "ConditionalCheckFailedException"


class FormRepository:
    """Persistence collaborator for forms and their submissions.

    Forms are keyed by form_id. Submissions are keyed by form_id and a
    time-ordered ULID submission_id so a query returns them newest first.
    """

    def __init__(self, forms_table, submissions_table):
        """Initialize the repository.

        Args:
            forms_table: DynamoDB table for form definitions
            submissions_table: DynamoDB table for submissions
        """
        self.forms_table = forms_table
        self.submissions_table = submissions_table

    @classmethod
    def from_environment(cls) -> "FormRepository":
        """Build a repository from FORMS_TABLE and SUBMISSIONS_TABLE."""
        dynamodb = boto3.resource("dynamodb", region_name=AWS_REGION)
        forms_table = os.environ.get("FORMS_TABLE", f"formflow-forms-{ENVIRONMENT}")
        submissions_table = os.environ.get(
            "SUBMISSIONS_TABLE", f"formflow-submissions-{ENVIRONMENT}"
        )
        return cls(dynamodb.Table(forms_table), dynamodb.Table(submissions_table))

    # Forms

    def save_form(self, definition: FormDefinition) -> str:
        """Create or replace a form definition.

        Returns:
            The form id

        Raises:
            CollaboratorError: On database errors
        """
        item = definition.model_dump(mode="json", by_alias=True)
        item["form_id"] = item.pop("id")
        try:
            self.forms_table.put_item(Item=prepare_for_dynamodb(item))
        except ClientError as e:
            logger.error("Failed to save form %s: %s", definition.id, e)
            raise CollaboratorError(f"Failed to save form: {e}") from e
        return definition.id

    def load_form(self, form_id: str) -> FormDefinition:
        """Load a form definition.

        Raises:
            FormNotFoundError: If the form does not exist
            CollaboratorError: On database errors
        """
        try:
            response = self.forms_table.get_item(Key={"form_id": form_id})
        except ClientError as e:
            logger.error("Failed to load form %s: %s", form_id, e)
            raise CollaboratorError(f"Failed to load form: {e}") from e

        item = response.get("Item")
        if not item:
            raise FormNotFoundError(form_id)

        parsed = parse_from_dynamodb(item)
        parsed["id"] = parsed.pop("form_id")
        return FormDefinition.model_validate(parsed)

    def delete_form(self, form_id: str) -> None:
        try:
            self.forms_table.delete_item(Key={"form_id": form_id})
        except ClientError as e:
            logger.error("Failed to delete form %s: %s", form_id, e)
            raise CollaboratorError(f"Failed to delete form: {e}") from e

    def set_published(self, form_id: str, published: bool) -> None:
        """Publish or unpublish a form.

        Raises:
            FormNotFoundError: If the form does not exist
            CollaboratorError: On database errors
        """
        try:
            self.forms_table.update_item(
                Key={"form_id": form_id},
                UpdateExpression="SET published = :p, updated_at = :u",
                ConditionExpression="attribute_exists(form_id)",
                ExpressionAttributeValues={
                    ":p": published,
                    ":u": datetime.now(UTC).isoformat(),
                },
            )
        except ClientError as e:
            if _is_conditional_failure(e):
                raise FormNotFoundError(form_id) from e
            logger.error("Failed to update publish state of %s: %s", form_id, e)
            raise CollaboratorError(f"Failed to update form: {e}") from e

    def publish_form(self, form_id: str) -> None:
        self.set_published(form_id, True)

    def unpublish_form(self, form_id: str) -> None:
        self.set_published(form_id, False)

    # Submissions

    def record_submission(self, form_id: str, responses: dict[str, Value]) -> str:
        """Store a new submission.

        Returns:
            The new submission id

        Raises:
            CollaboratorError: On database errors
        """
        submission_id = str(ULID())
        item = {
            "form_id": form_id,
            "submission_id": submission_id,
            "responses": responses,
            "submitted_at": datetime.now(UTC).isoformat(),
        }
        try:
            self.submissions_table.put_item(Item=prepare_for_dynamodb(item))
        except ClientError as e:
            logger.error("Failed to record submission for form %s: %s", form_id, e)
            raise CollaboratorError(f"Failed to record submission: {e}") from e
        return submission_id

    def list_submissions(
        self, form_id: str, limit: int | None = None
    ) -> list[FormSubmission]:
        """Get submissions for a form, newest first."""
        query: dict[str, Any] = {
            "KeyConditionExpression": Key("form_id").eq(form_id),
            "ScanIndexForward": False,
        }
        if limit:
            query["Limit"] = limit

        items: list[dict[str, Any]] = []
        try:
            while True:
                response = self.submissions_table.query(**query)
                items.extend(response.get("Items", []))
                last_key = response.get("LastEvaluatedKey")
                if not last_key or (limit and len(items) >= limit):
                    break
                query["ExclusiveStartKey"] = last_key
        except ClientError as e:
            logger.error("Failed to list submissions for form %s: %s", form_id, e)
            raise CollaboratorError(f"Failed to list submissions: {e}") from e

        return [
            FormSubmission(
                id=item["submission_id"],
                form_id=item["form_id"],
                responses=item.get("responses", {}),
                submitted_at=item.get("submitted_at", ""),
            )
            for item in parse_items_from_dynamodb(items[:limit] if limit else items)
        ]

    def update_submission(
        self, form_id: str, submission_id: str, responses: dict[str, Value]
    ) -> None:
        """Replace the responses of an existing submission under the same id.

        Raises:
            CollaboratorError: If the submission does not exist or on
                database errors
        """
        try:
            self.submissions_table.update_item(
                Key={"form_id": form_id, "submission_id": submission_id},
                UpdateExpression="SET responses = :r",
                ConditionExpression="attribute_exists(submission_id)",
                ExpressionAttributeValues={":r": prepare_for_dynamodb(responses)},
            )
        except ClientError as e:
            if _is_conditional_failure(e):
                raise CollaboratorError(
                    f"Submission {submission_id} not found"
                ) from e
            logger.error("Failed to update submission %s: %s", submission_id, e)
            raise CollaboratorError(f"Failed to update submission: {e}") from e

    def delete_submission(self, form_id: str, submission_id: str) -> bool:
        """Delete a submission.

        Returns:
            True if deleted, False if it did not exist
        """
        try:
            self.submissions_table.delete_item(
                Key={"form_id": form_id, "submission_id": submission_id},
                ConditionExpression="attribute_exists(submission_id)",
            )
            return True
        except ClientError as e:
            if _is_conditional_failure(e):
                return False
            logger.error("Failed to delete submission %s: %s", submission_id, e)
            raise CollaboratorError(f"Failed to delete submission: {e}") from e
