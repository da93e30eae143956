"""
XML Funnel Router
XML 업로드 파싱, 구조 분석, 데이터셋 저장 API 엔드포인트
"""

import asyncio
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Request, status

from funnel_shared.config.settings import ApplicationSettings, XmlParsingSettings, get_settings
from funnel_shared.exceptions import (
    DatasetNotFoundError,
    UnknownColumnsError,
    XmlIngestError,
)
from funnel_shared.interfaces.dataset_store import DatasetStoreInterface
from funnel_shared.models.xml_dataset import (
    ColumnSelectionRequest,
    DatasetUploadRecord,
    ErrorDetail,
    ParseResult,
    StructureAnalysis,
    XmlParseRequest,
    XmlParseResponse,
    XmlStructureRequest,
    XmlUploadResponse,
)
from funnel_shared.utils.app_logger import get_logger

from xml_funnel.models import InferenceConfig, ParseOptions
from xml_funnel.services.dataset_store import build_upload_record
from xml_funnel.services.xml_parser import UniversalXmlParser

logger = get_logger(__name__)

router = APIRouter(tags=["XML Parsing"])

ENGINE_ERROR_RESPONSES = {
    status.HTTP_422_UNPROCESSABLE_ENTITY: {"model": ErrorDetail, "description": "XML could not be turned into a dataset"},
}


def get_xml_parser(app_settings: ApplicationSettings = Depends(get_settings)) -> UniversalXmlParser:
    """파서 의존성"""
    parsing = app_settings.parsing
    return UniversalXmlParser(
        inference=InferenceConfig(
            sample_size=parsing.type_sample_size,
            type_threshold=parsing.type_threshold,
        )
    )


def get_dataset_store(request: Request) -> DatasetStoreInterface:
    """데이터셋 저장소 의존성"""
    return request.app.state.dataset_store


def build_parse_options(request: XmlParseRequest, parsing: XmlParsingSettings) -> ParseOptions:
    """Request flags win over configured defaults."""
    return ParseOptions(
        max_records=request.max_records if request.max_records is not None else parsing.default_max_records,
        skip_empty_fields=(
            request.skip_empty_fields
            if request.skip_empty_fields is not None
            else parsing.default_skip_empty_fields
        ),
        normalize_field_names=(
            request.normalize_field_names
            if request.normalize_field_names is not None
            else parsing.default_normalize_field_names
        ),
    )


async def run_parse(
    parser: UniversalXmlParser,
    xml_content: str,
    options: ParseOptions,
    timeout: Optional[float] = None,
) -> ParseResult:
    """
    Run the CPU-bound parse off the event loop.

    On timeout the worker thread is abandoned and its result discarded.
    """
    task = asyncio.to_thread(parser.parse, xml_content, options)
    if timeout:
        return await asyncio.wait_for(task, timeout=timeout)
    return await task


def _engine_error(e: XmlIngestError) -> HTTPException:
    logger.warning(f"XML parsing failed [{e.code}]: {e.message}")
    return HTTPException(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        detail=e.to_dict(),
    )


@router.post("/xml/parse", response_model=XmlParseResponse, responses=ENGINE_ERROR_RESPONSES)
async def parse_xml_document(
    request: XmlParseRequest,
    parser: UniversalXmlParser = Depends(get_xml_parser),
    app_settings: ApplicationSettings = Depends(get_settings),
) -> XmlParseResponse:
    """
    XML 문서를 파싱하여 레코드 구조, 컬럼 스키마, 행 데이터를 반환합니다.

    - 반복되는 레코드 구조 자동 탐지
    - 컬럼 타입 추론 (number / date / string)
    - maxRecords로 행 수 제한 (totalRecords는 항상 전체 개수)
    """
    try:
        options = build_parse_options(request, app_settings.parsing)
        logger.info(
            f"Parsing XML '{request.file_name or 'inline'}' "
            f"({len(request.xml_content)} chars, maxRecords={options.max_records})"
        )
        result = await run_parse(
            parser, request.xml_content, options, app_settings.parsing.parse_timeout_seconds
        )
        return XmlParseResponse.from_result(result)

    except XmlIngestError as e:
        raise _engine_error(e)
    except asyncio.TimeoutError:
        logger.error("XML parsing timed out")
        raise HTTPException(
            status_code=status.HTTP_504_GATEWAY_TIMEOUT,
            detail="XML parsing timed out",
        )
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except Exception as e:
        logger.error(f"XML parsing failed unexpectedly: {str(e)}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"XML parsing failed: {str(e)}",
        )


@router.post("/xml/structure", response_model=StructureAnalysis, responses=ENGINE_ERROR_RESPONSES)
async def analyze_xml_structure(
    request: XmlStructureRequest,
    parser: UniversalXmlParser = Depends(get_xml_parser),
) -> StructureAnalysis:
    """
    행 추출 없이 XML 구조(시그니처 그룹)만 분석합니다.
    """
    try:
        return await asyncio.to_thread(parser.analyze_structure, request.xml_content)
    except XmlIngestError as e:
        raise _engine_error(e)
    except Exception as e:
        logger.error(f"XML structure analysis failed: {str(e)}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"XML structure analysis failed: {str(e)}",
        )


@router.post(
    "/tenants/{tenant_id}/dashboards/{dashboard_id}/upload-xml",
    response_model=XmlUploadResponse,
    responses=ENGINE_ERROR_RESPONSES,
    tags=["Datasets"],
)
async def upload_xml_dataset(
    tenant_id: str,
    dashboard_id: str,
    request: XmlParseRequest,
    parser: UniversalXmlParser = Depends(get_xml_parser),
    store: DatasetStoreInterface = Depends(get_dataset_store),
    app_settings: ApplicationSettings = Depends(get_settings),
) -> XmlUploadResponse:
    """
    XML 파일을 파싱한 뒤 대시보드 데이터셋으로 저장합니다.

    파싱에 실패하면 아무것도 저장하지 않습니다.
    """
    parsing = app_settings.parsing
    try:
        options = build_parse_options(request, parsing)
        result = await run_parse(parser, request.xml_content, options, parsing.parse_timeout_seconds)
    except XmlIngestError as e:
        raise _engine_error(e)
    except asyncio.TimeoutError:
        raise HTTPException(
            status_code=status.HTTP_504_GATEWAY_TIMEOUT,
            detail="XML parsing timed out",
        )
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))

    record = build_upload_record(
        result,
        request.xml_content,
        request.file_name,
        sample_limit=parsing.sample_record_limit,
        inline_max_bytes=parsing.inline_content_max_bytes,
    )

    try:
        await store.save(tenant_id, dashboard_id, record)
    except Exception as e:
        logger.error(f"Failed to persist XML dataset for tenant {tenant_id}: {str(e)}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to persist XML dataset: {str(e)}",
        )

    logger.info(
        f"Stored XML dataset for tenant {tenant_id}, dashboard {dashboard_id}: "
        f"{record.total_records} records, {record.file_size} bytes"
    )
    return XmlUploadResponse(
        tenant_id=tenant_id,
        dashboard_id=dashboard_id,
        file_name=record.file_name,
        file_size=record.file_size,
        uploaded_at=record.uploaded_at,
        parse_result=XmlParseResponse.from_result(result),
    )


@router.get(
    "/tenants/{tenant_id}/dashboards/{dashboard_id}/xml-data",
    response_model=DatasetUploadRecord,
    tags=["Datasets"],
)
async def get_xml_dataset(
    tenant_id: str,
    dashboard_id: str,
    store: DatasetStoreInterface = Depends(get_dataset_store),
) -> DatasetUploadRecord:
    """저장된 XML 데이터셋 조회"""
    record = await store.get(tenant_id, dashboard_id)
    if record is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=DatasetNotFoundError(tenant_id, dashboard_id).to_dict(),
        )
    return record


@router.put(
    "/tenants/{tenant_id}/dashboards/{dashboard_id}/columns",
    response_model=DatasetUploadRecord,
    tags=["Datasets"],
)
async def select_dataset_columns(
    tenant_id: str,
    dashboard_id: str,
    request: ColumnSelectionRequest,
    store: DatasetStoreInterface = Depends(get_dataset_store),
) -> DatasetUploadRecord:
    """위젯에 사용할 컬럼 선택 저장 (파싱 결과에는 영향 없음)"""
    try:
        return await store.update_selected_columns(tenant_id, dashboard_id, request.selected_columns)
    except DatasetNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=e.to_dict())
    except UnknownColumnsError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=e.to_dict())
