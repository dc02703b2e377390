"""User-facing strings (Turkish)."""

from __future__ import annotations

REQUIRED_FIELD = "{label} alanı zorunludur."

QUOTE_SUBMIT_FAILED = "İlan gönderilirken bir hata oluştu."
REPORT_SUBMIT_FAILED = "Rapor gönderilirken bir hata oluştu."
DISPUTE_SUBMIT_FAILED = "Anlaşmazlık raporu gönderilemedi."
DISPUTE_SUBMIT_FAILED_PREFIX = "Anlaşmazlık raporu gönderilemedi: "

REPORT_REASON_REQUIRED = "Lütfen raporlamak için bir neden belirtin."
DISPUTE_DETAILS_REQUIRED = "Lütfen yaşadığınız sorunu detaylı olarak açıklayın."

REPORT_RECEIVED = "Raporunuz Alındı!"
REPORT_RECEIVED_DETAIL = (
    "Geri bildiriminiz için teşekkür ederiz. Ekibimiz durumu en kısa sürede inceleyecektir."
)
DISPUTE_RECEIVED = "Anlaşmazlık Raporunuz Alındı!"
DISPUTE_RECEIVED_DETAIL = "Ekibimiz durumu en kısa sürede inceleyerek size geri dönüş yapacaktır."

LOGIN_REQUIRED_POST = "İlan oluşturmak için giriş yapmalısınız."
LOGIN_REQUIRED_REPORT = "İlanı raporlamak için giriş yapmalısınız."

GEO_PERMISSION_DENIED = "Konum iznini reddettiniz."
GEO_POSITION_UNAVAILABLE = "Konum bilgisi mevcut değil."
GEO_TIMEOUT = "Konum bilgisi alma isteği zaman aşımına uğradı."
GEO_UNSUPPORTED = "Konum özelliği bu cihazda desteklenmiyor."
GEO_UNKNOWN = "Bilinmeyen bir hata oluştu."
GEO_PENDING = "Konum Alınıyor..."

BUTTON_NEXT = "İleri"
BUTTON_PUBLISH = "İlanı Yayınla"
BUTTON_SUBMITTING = "Yayınlanıyor..."
BUTTON_SUCCESS = "Başarılı!"
BUTTON_RETRY = "Tekrar Dene"

CATALOG_FALLBACK = "Kategori kataloğu yüklenemedi, varsayılan veriler kullanılıyor."
