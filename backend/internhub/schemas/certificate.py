from internhub.schemas.common import CamelModel


class CertificateData(CamelModel):
    """Flat record substituted into the certificate template"""
    user_name: str
    internship_title: str
    role: str
    start_date: str
    end_date: str
    duration: str
    issue_date: str
    certificate_id: str


class CertificateDataResponse(CamelModel):
    success: bool = True
    data: CertificateData
    message: str = "Certificate data retrieved successfully"
