import logging
from typing import Dict, List, Optional

from fastapi import APIRouter, Depends, Request
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import JSONResponse
from starlette.datastructures import FormData, UploadFile
from starlette.exceptions import HTTPException
from starlette.formparsers import MultiPartException

from ..config import Settings, get_settings
from ..schemas.submission import ErrorResponse, SubmitResponse
from ..services.submission_reader import list_submissions
from ..services.submission_store import store_submission
from ..utils.file_handler import (
    FileTooLargeError,
    UploadedFile,
    delete_file,
    save_upload_file,
)

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Ideas"])


def _error(error: str, detail: Optional[str] = None) -> JSONResponse:
    return JSONResponse(
        status_code=500,
        content=ErrorResponse(error=error, detail=detail).model_dump(
            exclude_none=True
        ),
    )


def _split_form(form: FormData):
    """Separate text fields from file parts; repeated keys are joined"""
    fields: Dict[str, List[str]] = {}
    uploads: List[UploadFile] = []
    for key, value in form.multi_items():
        if isinstance(value, UploadFile):
            uploads.append(value)
        else:
            fields.setdefault(key, []).append(value)
    return {key: ",".join(values) for key, values in fields.items()}, uploads


@router.get("/api/ideas", response_model=List[Dict[str, str]])
def get_ideas(settings: Settings = Depends(get_settings)):
    """Get every stored idea, labelled as in its metadata file"""
    try:
        return list_submissions(settings.submissions_dir)
    except (OSError, ValueError):
        logger.exception("Failed to fetch ideas")
        return _error("Failed to fetch ideas")


@router.post(
    "/submit",
    response_model=SubmitResponse,
    responses={500: {"model": ErrorResponse}},
)
async def submit_idea(
    request: Request, settings: Settings = Depends(get_settings)
):
    """Store a multipart idea submission and its attachments"""
    logger.info("Incoming submission...")
    form = None
    files: List[UploadedFile] = []
    try:
        try:
            form = await request.form(
                max_files=settings.max_files,
                max_fields=settings.max_fields,
                max_part_size=settings.max_field_size,
            )
            fields, uploads = _split_form(form)
            for upload in uploads:
                files.append(
                    await run_in_threadpool(
                        save_upload_file,
                        upload,
                        settings.upload_tmp_dir,
                        settings.max_file_size,
                    )
                )
        except (MultiPartException, HTTPException) as e:
            logger.error("Form parse error: %s", e)
            return _error(
                "Form parse failed",
                str(getattr(e, "detail", None) or getattr(e, "message", e)),
            )
        except FileTooLargeError as e:
            logger.error("Form parse error: %s", e)
            return _error("Form parse failed", str(e))

        try:
            submission_id = await run_in_threadpool(
                store_submission, settings.submissions_dir, fields, files
            )
        except OSError as e:
            logger.exception("Failed to store submission")
            return _error("Failed to store submission", str(e))
    except Exception as e:
        logger.exception("Unexpected server error")
        return _error("Unexpected server error", str(e))
    finally:
        # Anything still in the upload dir was never moved into a submission
        for uploaded in files:
            delete_file(uploaded.filepath)
        if form is not None:
            await form.close()

    logger.info("Submission stored with ID: %s", submission_id)
    return SubmitResponse(id=submission_id)
