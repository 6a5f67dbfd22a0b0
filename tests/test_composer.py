import base64, re, tempfile, unittest
from pathlib import Path
from gmail_mime import (
    AttachmentData,
    AttachmentNotFound,
    EmailParams,
    InvalidAddress,
    MimeType,
    create_email_message,
    load_attachment,
    validate_email,
)

def boundaries(message: str):
    return re.findall(r'boundary="([^"]+)"', message)

def uses_only_crlf(message: str) -> bool:
    return "\n" not in message.replace("\r\n", "") and "\r" not in message.replace("\r\n", "")

class TestValidateEmail(unittest.TestCase):
    def test_valid(self):
        for email in ["a@b.co", "test@example.com", "user.name@domain.co.uk"]:
            self.assertTrue(validate_email(email), email)

    def test_invalid(self):
        for email in ["not-an-email", "@domain.com", "user@", "user@.com", "user@domain.",
                      "user@domain", "a@b@c.com", "us er@domain.com", "user@dom ain.com", ""]:
            self.assertFalse(validate_email(email), email)

class TestCreateEmailMessage(unittest.TestCase):
    def test_plain_text(self):
        msg = create_email_message(EmailParams(to=["a@b.com"], subject="S", body="hi"))
        lines = msg.split("\r\n")
        self.assertTrue(uses_only_crlf(msg))
        self.assertEqual(lines[:4], ["From: me", "To: a@b.com", "Subject: S", "MIME-Version: 1.0"])
        self.assertEqual(lines.count("Content-Type: text/plain; charset=UTF-8"), 1)
        self.assertIn("hi", lines)
        self.assertEqual(boundaries(msg), [])

    def test_invalid_recipient(self):
        with self.assertRaises(InvalidAddress) as ctx:
            create_email_message(EmailParams(to=["ok@example.com", "invalid"], subject="S", body="b"))
        self.assertEqual(ctx.exception.address, "invalid")

    def test_cc_bcc_are_not_validated(self):
        msg = create_email_message(EmailParams(
            to=["a@b.com", "c@d.org"], subject="S", body="b", cc=["not valid"], bcc=["x@y.com"],
        ))
        self.assertIn("To: a@b.com, c@d.org\r\n", msg)
        self.assertIn("Cc: not valid\r\n", msg)
        self.assertIn("Bcc: x@y.com\r\n", msg)

    def test_empty_cc_is_omitted(self):
        msg = create_email_message(EmailParams(to=["a@b.com"], subject="S", body="b", cc=[], bcc=[]))
        self.assertNotIn("Cc:", msg)
        self.assertNotIn("Bcc:", msg)

    def test_reply_headers_and_encoded_subject(self):
        msg = create_email_message(EmailParams(
            to=["a@b.com"], subject="Re: Café", body="b", in_reply_to="<orig@mail.example.com>",
        ))
        lines = msg.split("\r\n")
        subject = lines.index("Subject: =?UTF-8?B?" + base64.b64encode("Re: Café".encode()).decode() + "?=")
        self.assertEqual(lines[subject + 1], "In-Reply-To: <orig@mail.example.com>")
        self.assertEqual(lines[subject + 2], "References: <orig@mail.example.com>")
        self.assertEqual(lines[subject + 3], "MIME-Version: 1.0")

    def test_empty_reply_reference_still_emits_threading_headers(self):
        lines = create_email_message(EmailParams(to=["a@b.com"], subject="S", body="b", in_reply_to="")).split("\r\n")
        self.assertIn("In-Reply-To: ", lines)
        self.assertIn("References: ", lines)

    def test_alternative(self):
        msg = create_email_message(EmailParams(
            to=["a@b.com"], subject="S", body="plain", html_body="<p>rich</p>",
            mime_type=MimeType.MULTIPART_ALTERNATIVE,
        ))
        self.assertTrue(uses_only_crlf(msg))
        (boundary,) = boundaries(msg)
        lines = msg.split("\r\n")
        self.assertEqual(lines.count(f"--{boundary}"), 2)
        self.assertEqual(lines.count(f"--{boundary}--"), 1)
        self.assertEqual(sum(1 for line in lines if line.startswith(f"--{boundary}")), 3)
        plain = lines.index("Content-Type: text/plain; charset=UTF-8")
        html = lines.index("Content-Type: text/html; charset=UTF-8")
        self.assertLess(plain, html)
        self.assertEqual(lines[plain + 1], "Content-Transfer-Encoding: 7bit")
        self.assertEqual(lines[plain + 3], "plain")
        self.assertEqual(lines[html + 3], "<p>rich</p>")

    def test_html_with_plain_hint_is_plain(self):
        msg = create_email_message(EmailParams(
            to=["a@b.com"], subject="S", body="plain", html_body="<p>rich</p>", mime_type=MimeType.TEXT_PLAIN,
        ))
        self.assertNotIn("text/html", msg)
        self.assertNotIn("<p>rich</p>", msg)

    def test_html_without_hint_is_plain(self):
        msg = create_email_message(EmailParams(to=["a@b.com"], subject="S", body="plain", html_body="<p>x</p>"))
        self.assertIn("Content-Type: text/plain; charset=UTF-8", msg)
        self.assertNotIn("multipart", msg)

    def test_html_hint_without_html_body(self):
        msg = create_email_message(EmailParams(
            to=["a@b.com"], subject="S", body="<b>body</b>", mime_type=MimeType.TEXT_HTML,
        ))
        lines = msg.split("\r\n")
        self.assertEqual(lines[-4:], [
            "Content-Type: text/html; charset=UTF-8",
            "Content-Transfer-Encoding: 7bit",
            "",
            "<b>body</b>",
        ])

    def test_attachment_is_wrapped_base64(self):
        data = bytes(range(256)) * 3
        msg = create_email_message(EmailParams(
            to=["a@b.com"], subject="S", body="see attached",
            attachments=[AttachmentData(filename="blob.bin", mime_type="application/octet-stream", data=data)],
        ))
        self.assertTrue(uses_only_crlf(msg))
        (mixed,) = boundaries(msg)
        self.assertTrue(mixed.startswith("----=_MixedPart_"))
        lines = msg.split("\r\n")
        self.assertEqual(lines[-1], f"--{mixed}--")
        self.assertIn('Content-Type: application/octet-stream; name="blob.bin"', lines)
        disposition = lines.index('Content-Disposition: attachment; filename="blob.bin"')
        self.assertEqual(lines[disposition - 1], "Content-Transfer-Encoding: base64")
        self.assertEqual(lines[disposition + 1], "")
        body_lines = []
        for line in lines[disposition + 2:]:
            if not line:
                break
            body_lines.append(line)
        self.assertTrue(all(len(line) == 76 for line in body_lines[:-1]))
        self.assertLessEqual(len(body_lines[-1]), 76)
        self.assertEqual(base64.b64decode("".join(body_lines)), data)

    def test_attachment_with_alternative_body(self):
        msg = create_email_message(EmailParams(
            to=["a@b.com"], subject="S", body="plain", html_body="<p>rich</p>",
            mime_type=MimeType.MULTIPART_ALTERNATIVE,
            attachments=[
                AttachmentData(filename="résumé.txt", mime_type="text/plain", data=b"one"),
                AttachmentData(filename="two.txt", mime_type="text/plain", data=b"two"),
            ],
        ))
        mixed, alt = boundaries(msg)
        self.assertNotEqual(mixed, alt)
        self.assertTrue(alt.startswith("----=_AltPart_"))
        lines = msg.split("\r\n")
        self.assertEqual(lines.count(f"--{mixed}"), 3)
        self.assertEqual(lines.count(f"--{alt}"), 2)
        self.assertLess(lines.index(f"--{alt}--"), lines.index(f"--{mixed}", lines.index(f"--{mixed}") + 1))
        encoded_name = "=?UTF-8?B?" + base64.b64encode("résumé.txt".encode()).decode() + "?="
        self.assertIn(f'Content-Disposition: attachment; filename="{encoded_name}"', lines)

    def test_empty_attachment_list_is_no_attachment(self):
        msg = create_email_message(EmailParams(to=["a@b.com"], subject="S", body="b", attachments=[]))
        self.assertNotIn("multipart/mixed", msg)

class TestLoadAttachment(unittest.TestCase):
    def test_load_and_guess_type(self):
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "notes.txt"
            path.write_bytes(b"hello")
            att = load_attachment(str(path))
            self.assertEqual(att.filename, "notes.txt")
            self.assertEqual(att.mime_type, "text/plain")
            self.assertEqual(att.data, b"hello")

    def test_unknown_extension(self):
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "blob.zzqx"
            path.write_bytes(b"\x00")
            self.assertEqual(load_attachment(path).mime_type, "application/octet-stream")

    def test_missing_file(self):
        with self.assertRaises(AttachmentNotFound) as ctx:
            load_attachment("/nonexistent/dir/file.pdf")
        self.assertEqual(ctx.exception.path, "/nonexistent/dir/file.pdf")
        with self.assertRaises(FileNotFoundError):
            load_attachment("/nonexistent/dir/file.pdf")

class TestMimeTypeHint(unittest.TestCase):
    def test_from_hint(self):
        self.assertIs(MimeType.from_hint("text/html"), MimeType.TEXT_HTML)
        self.assertIs(MimeType.from_hint("multipart/alternative"), MimeType.MULTIPART_ALTERNATIVE)
        self.assertIsNone(MimeType.from_hint("text/plain"))
        self.assertIsNone(MimeType.from_hint(None))

if __name__ == "__main__":
    unittest.main()
