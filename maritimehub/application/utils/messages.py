# User-facing texts shown by the booking/payment screens (Vietnamese, as in the app).

BOOKING_FAILED = "Đã có lỗi xảy ra khi đặt chỗ"
BOOKING_IN_PROGRESS = "Đang xử lý đặt chỗ, vui lòng đợi."
BOOKING_CREATED = "Đặt chỗ thành công!"

END_BEFORE_START = "Thời gian kết thúc phải sau thời gian bắt đầu."
OUTSIDE_SLOT_WINDOW = "Thời gian đặt nằm ngoài khung giờ khả dụng của chỗ đậu."
SHIP_REQUIRED = "Vui lòng chọn thuyền."
SLOT_REQUIRED = "Vui lòng chọn chỗ đậu."
SERVICE_REQUIRED = "Vui lòng chọn ít nhất một dịch vụ."
ADDRESS_REQUIRED = "Vui lòng chọn cảng giao hàng."

PAYMENT_CREATION_FAILED = "Không thể tạo thanh toán. Vui lòng thử lại."
PAYMENT_DATA_MISSING = "Không nhận được dữ liệu thanh toán từ server."

PAYMENT_SUCCEEDED = "Thanh toán thành công!"
PAYMENT_CANCELLED = "Bạn đã hủy thanh toán."
PAYMENT_FAILED = "Giao dịch thất bại. Vui lòng thử lại."
PAYMENT_UNCONFIRMED = "Chưa xác nhận được thanh toán. Bạn có thể thanh toán lại sau."
PAYMENT_PENDING_VERIFICATION = "Hệ thống sẽ kiểm tra giao dịch của bạn. Vui lòng đợi trong giây lát."
