"""
Security rule tables

One table of regex rules per dialect, each rule tagged with its
vulnerability category, severity, CWE id and remediation text. Patterns
run over comment-stripped text unless ``match_raw`` is set, so commented
out code does not produce findings while key material pasted into a
comment still does.

All patterns use bounded quantifiers (\\s{0,20} instead of \\s*) so a
pathological line cannot make a rule backtrack for long.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Mapping

from ..dialects import LanguageDialect
from ..models.security import Severity, VulnerabilityType as V

OWASP_INJECTION = 'https://owasp.org/www-community/attacks/Code_Injection'
OWASP_COMMAND = 'https://owasp.org/www-community/attacks/Command_Injection'
OWASP_SQL = 'https://owasp.org/www-community/attacks/SQL_Injection'
OWASP_XSS = 'https://owasp.org/www-community/attacks/xss/'
OWASP_PATH = 'https://owasp.org/www-community/attacks/Path_Traversal'
OWASP_SECRETS = 'https://owasp.org/www-project-top-ten/2017/A3_2017-Sensitive_Data_Exposure'
OWASP_DESERIAL = 'https://owasp.org/www-community/vulnerabilities/Insecure_Deserialization'
OWASP_XXE = 'https://owasp.org/www-community/vulnerabilities/XML_External_Entity_(XXE)_Processing'
OWASP_CRYPTO = 'https://owasp.org/www-project-top-ten/2017/A3_2017-Sensitive_Data_Exposure'
CWE_URL = 'https://cwe.mitre.org/data/definitions/{}.html'


@dataclass(frozen=True)
class SecurityRule:
    """One regex rule. Every match becomes one finding."""

    pattern: re.Pattern[str]
    type: V
    severity: Severity
    message: str
    cwe: str | None = None
    recommendation: str = ''
    example_fix: str | None = None
    references: tuple[str, ...] = field(default_factory=tuple)
    match_raw: bool = False


def _rule(
    pattern: str,
    vtype: V,
    severity: Severity,
    message: str,
    cwe: str | None = None,
    recommendation: str = '',
    example_fix: str | None = None,
    references: tuple[str, ...] = (),
    flags: int = 0,
    match_raw: bool = False,
) -> SecurityRule:
    refs = references
    if cwe and not refs:
        refs = (CWE_URL.format(cwe.split('-')[1]),)
    return SecurityRule(
        pattern=re.compile(pattern, flags),
        type=vtype,
        severity=severity,
        message=message,
        cwe=cwe,
        recommendation=recommendation,
        example_fix=example_fix,
        references=refs,
        match_raw=match_raw,
    )


# ---------------------------------------------------------------------------
# Rules shared by every dialect
# ---------------------------------------------------------------------------

_COMMON_RULES = (
    _rule(
        r'''\b(?:password|passwd|token|secret|api_?key|credential)s?\s{0,20}[:=]\s{0,20}['"][^'"\n]{1,200}['"]''',
        V.SENSITIVE_DATA_EXPOSURE, Severity.MEDIUM,
        "Hard-coded credential or secret in source.",
        cwe='CWE-798',
        recommendation="Load secrets from environment variables or a secret manager.",
        example_fix="# Unsafe:\napi_key = 'abcd1234'\n\n# Safe:\napi_key = os.environ.get('API_KEY')",
        references=(OWASP_SECRETS,),
        flags=re.IGNORECASE,
    ),
    _rule(
        r'-----BEGIN (?:RSA |EC |DSA |OPENSSH )?PRIVATE KEY-----',
        V.SENSITIVE_DATA_EXPOSURE, Severity.CRITICAL,
        "Private key material embedded in source.",
        cwe='CWE-321',
        recommendation="Remove the key, rotate it, and load keys from a secure store at runtime.",
        match_raw=True,
    ),
    _rule(
        r'\bAKIA[0-9A-Z]{16}\b',
        V.SENSITIVE_DATA_EXPOSURE, Severity.CRITICAL,
        "AWS access key id embedded in source.",
        cwe='CWE-798',
        recommendation="Revoke the key and use an IAM role or environment-provided credentials.",
        match_raw=True,
    ),
    _rule(
        r'''['"]http://(?!localhost|127\.0\.0\.1|0\.0\.0\.0)[^'"\s]{1,200}['"]''',
        V.SENSITIVE_DATA_EXPOSURE, Severity.LOW,
        "Plain-text HTTP URL; traffic can be read or modified in transit.",
        cwe='CWE-319',
        recommendation="Use https:// for every external endpoint.",
    ),
)


# ---------------------------------------------------------------------------
# JavaScript / TypeScript
# ---------------------------------------------------------------------------

_JS_RULES = (
    _rule(
        r'\beval\s{0,20}\(',
        V.INJECTION, Severity.HIGH,
        "eval() executes arbitrary code.",
        cwe='CWE-95',
        recommendation="Avoid eval(); use JSON.parse for data.",
        example_fix="// Unsafe:\neval(userInput);\n\n// Safe:\nJSON.parse(userInput);",
        references=(OWASP_INJECTION,),
    ),
    _rule(
        r'\bnew\s{1,20}Function\s{0,20}\(',
        V.INJECTION, Severity.HIGH,
        "new Function() compiles a string into code.",
        cwe='CWE-95',
        recommendation="Replace dynamic code generation with ordinary functions.",
        references=(OWASP_INJECTION,),
    ),
    _rule(
        r'''\bset(?:Timeout|Interval)\s{0,20}\(\s{0,20}['"`]''',
        V.INJECTION, Severity.MEDIUM,
        "Timer called with a string argument evaluates it as code.",
        cwe='CWE-95',
        recommendation="Pass a function to setTimeout/setInterval, not a string.",
    ),
    _rule(
        r'''\bexec(?:Sync)?\s{0,20}\(\s{0,20}(?:['"`][^'"`\n]{0,200}['"`]\s{0,20}\+|`[^`\n]{0,200}\$\{|\w+)''',
        V.INJECTION, Severity.HIGH,
        "Possible command injection through child_process exec.",
        cwe='CWE-78',
        recommendation="Use execFile/spawn with an argument array and validate input.",
        references=(OWASP_COMMAND,),
    ),
    _rule(
        r'''\b(?:SELECT|INSERT|UPDATE|DELETE)\b[^'"`\n]{0,200}['"`]\s{0,20}\+\s{0,20}\w+''',
        V.INJECTION, Severity.HIGH,
        "SQL statement built by string concatenation.",
        cwe='CWE-89',
        recommendation="Use parameterized queries or a query builder.",
        references=(OWASP_SQL,),
        flags=re.IGNORECASE,
    ),
    _rule(
        r'''\.innerHTML\s{0,20}=(?!=)(?!\s{0,20}['"`][^'"`$]{0,200}['"`]\s{0,20};?\s{0,20}$)''',
        V.XSS, Severity.MEDIUM,
        "Assigning to innerHTML can inject unescaped user input.",
        cwe='CWE-79',
        recommendation="Use textContent, or sanitize with a library such as DOMPurify.",
        example_fix="// Unsafe:\nelement.innerHTML = userInput;\n\n// Safe:\nelement.textContent = userInput;",
        references=(OWASP_XSS,),
        flags=re.MULTILINE,
    ),
    _rule(
        r'\bdocument\.write(?:ln)?\s{0,20}\(',
        V.XSS, Severity.MEDIUM,
        "document.write is prone to XSS.",
        cwe='CWE-79',
        recommendation="Build the DOM with createElement and textContent.",
        references=(OWASP_XSS,),
    ),
    _rule(
        r'\bdangerouslySetInnerHTML\b',
        V.XSS, Severity.MEDIUM,
        "dangerouslySetInnerHTML bypasses React's escaping.",
        cwe='CWE-79',
        recommendation="Sanitize the HTML before rendering or render text instead.",
        references=(OWASP_XSS,),
    ),
    _rule(
        r'\b(?:readFile|readFileSync|createReadStream|sendFile)\s{0,20}\([^)\n]{0,200}\breq\.(?:params|query|body)',
        V.BROKEN_ACCESS_CONTROL, Severity.HIGH,
        "File path built from request input (path traversal).",
        cwe='CWE-22',
        recommendation="Resolve the path and check that it stays inside an allowed directory.",
        references=(OWASP_PATH,),
    ),
    _rule(
        r'\brejectUnauthorized\s{0,20}:\s{0,20}false\b',
        V.SECURITY_MISCONFIGURATION, Severity.HIGH,
        "TLS certificate verification disabled.",
        cwe='CWE-295',
        recommendation="Keep certificate verification on; trust a custom CA if needed.",
    ),
    _rule(
        r'''Access-Control-Allow-Origin['"]?\s{0,20}[,:]\s{0,20}['"]\*['"]|\borigin\s{0,20}:\s{0,20}['"]\*['"]''',
        V.SECURITY_MISCONFIGURATION, Severity.MEDIUM,
        "CORS allows any origin.",
        cwe='CWE-942',
        recommendation="Restrict allowed origins to known hosts.",
    ),
    _rule(
        r'''\bcreateHash\s{0,20}\(\s{0,20}['"](?:md5|sha1)['"]''',
        V.SENSITIVE_DATA_EXPOSURE, Severity.MEDIUM,
        "Weak hash algorithm (MD5/SHA-1).",
        cwe='CWE-328',
        recommendation="Use SHA-256 or better; use bcrypt/scrypt/argon2 for passwords.",
        references=(OWASP_CRYPTO,),
    ),
    _rule(
        r'\bMath\.random\s{0,20}\(',
        V.OTHER, Severity.LOW,
        "Math.random is not cryptographically secure.",
        cwe='CWE-338',
        recommendation="Use crypto.getRandomValues or crypto.randomBytes for security values.",
    ),
    _rule(
        r'\bcatch\s{0,20}(?:\(\s{0,20}\w*\s{0,20}\))?\s{0,20}\{\s{0,20}\}',
        V.INSUFFICIENT_LOGGING, Severity.LOW,
        "Empty catch block swallows errors.",
        cwe='CWE-390',
        recommendation="Log or rethrow the error.",
    ),
)


# ---------------------------------------------------------------------------
# Python
# ---------------------------------------------------------------------------

_PYTHON_RULES = (
    _rule(
        r'(?<![\w.])(?:eval|exec)\s{0,20}\(',
        V.INJECTION, Severity.HIGH,
        "eval()/exec() can run arbitrary code.",
        cwe='CWE-95',
        recommendation="Use ast.literal_eval for literals, or avoid dynamic execution.",
        references=(OWASP_INJECTION,),
    ),
    _rule(
        r'\bos\.(?:system|popen)\s{0,20}\(',
        V.INJECTION, Severity.HIGH,
        "Shell command execution through os.system/os.popen.",
        cwe='CWE-78',
        recommendation="Use subprocess.run with an argument list and shell=False.",
        references=(OWASP_COMMAND,),
    ),
    _rule(
        r'\bsubprocess\.\w+\s{0,20}\([^)\n]{0,200}\bshell\s{0,20}=\s{0,20}True',
        V.INJECTION, Severity.HIGH,
        "subprocess call with shell=True.",
        cwe='CWE-78',
        recommendation="Pass the command as a list and keep shell=False.",
        example_fix=(
            "# Unsafe:\nsubprocess.call('grep ' + user_input + ' file.txt', shell=True)\n\n"
            "# Safe:\nsubprocess.call(['grep', user_input, 'file.txt'])"
        ),
        references=(OWASP_COMMAND,),
    ),
    _rule(
        r'''\.execute(?:many)?\s{0,20}\(\s{0,20}(?:f['"]|['"][^'"\n]{0,200}['"]\s{0,20}(?:%|\+|\.format\b))''',
        V.INJECTION, Severity.HIGH,
        "SQL query built with string formatting.",
        cwe='CWE-89',
        recommendation="Use parameterized queries.",
        example_fix=(
            "# Unsafe:\ncursor.execute(\"SELECT * FROM users WHERE name = '\" + name + \"'\")\n\n"
            "# Safe:\ncursor.execute(\"SELECT * FROM users WHERE name = %s\", (name,))"
        ),
        references=(OWASP_SQL,),
    ),
    _rule(
        r'\b(?:pickle|cPickle|marshal|shelve)\.loads?\s{0,20}\(',
        V.INSECURE_DESERIALIZATION, Severity.HIGH,
        "Deserializing untrusted data with pickle/marshal can execute code.",
        cwe='CWE-502',
        recommendation="Use JSON or another data-only format for untrusted input.",
        references=(OWASP_DESERIAL,),
    ),
    _rule(
        r'\byaml\.load\s{0,20}\((?![^)\n]{0,200}Loader\s{0,20}=\s{0,20}(?:yaml\.)?SafeLoader)',
        V.INSECURE_DESERIALIZATION, Severity.HIGH,
        "yaml.load without SafeLoader can construct arbitrary objects.",
        cwe='CWE-502',
        recommendation="Use yaml.safe_load.",
        references=(OWASP_DESERIAL,),
    ),
    _rule(
        r'\.format\s{0,20}\([^)\n]{0,200}\brequest\.',
        V.XSS, Severity.MEDIUM,
        "Request data formatted straight into output.",
        cwe='CWE-79',
        recommendation="Render through an auto-escaping template engine.",
        references=(OWASP_XSS,),
    ),
    _rule(
        r'\bmark_safe\s{0,20}\(',
        V.XSS, Severity.MEDIUM,
        "mark_safe disables template escaping.",
        cwe='CWE-79',
        recommendation="Escape the value with format_html instead.",
        references=(OWASP_XSS,),
    ),
    _rule(
        r'\bopen\s{0,20}\([^)\n]{0,200}\brequest\.',
        V.BROKEN_ACCESS_CONTROL, Severity.HIGH,
        "File opened with a path taken from the request.",
        cwe='CWE-22',
        recommendation="Normalize the path and confine it to an allowed directory.",
        references=(OWASP_PATH,),
    ),
    _rule(
        r'\bDEBUG\s{0,20}=\s{0,20}True\b|\bdebug\s{0,20}=\s{0,20}True\b',
        V.SECURITY_MISCONFIGURATION, Severity.MEDIUM,
        "Debug mode enabled.",
        cwe='CWE-489',
        recommendation="Read the debug flag from configuration and keep it off in production.",
    ),
    _rule(
        r'\bverify\s{0,20}=\s{0,20}False\b',
        V.SECURITY_MISCONFIGURATION, Severity.HIGH,
        "TLS certificate verification disabled.",
        cwe='CWE-295',
        recommendation="Keep verify=True or point it at a CA bundle.",
    ),
    _rule(
        r'''\bhashlib\.(?:md5|sha1)\s{0,20}\(|\bhashlib\.new\s{0,20}\(\s{0,20}['"](?:md5|sha1)['"]''',
        V.SENSITIVE_DATA_EXPOSURE, Severity.MEDIUM,
        "Weak hash algorithm (MD5/SHA-1).",
        cwe='CWE-328',
        recommendation="Use hashlib.sha256; use a password KDF for credentials.",
        references=(OWASP_CRYPTO,),
    ),
    _rule(
        r'\bxml\.(?:etree|dom|sax)\b|\blxml\.etree\b',
        V.XXE, Severity.LOW,
        "Standard XML parsers may resolve external entities.",
        cwe='CWE-611',
        recommendation="Parse untrusted XML with defusedxml.",
        references=(OWASP_XXE,),
    ),
    _rule(
        r'\bexcept\b[^:\n]{0,200}:\s{0,20}(?:\n\s{0,200})?pass\b',
        V.INSUFFICIENT_LOGGING, Severity.LOW,
        "Exception silently ignored.",
        cwe='CWE-390',
        recommendation="Log the exception or handle it explicitly.",
    ),
)


# ---------------------------------------------------------------------------
# Java
# ---------------------------------------------------------------------------

_JAVA_RULES = (
    _rule(
        r'\bRuntime\.getRuntime\s{0,20}\(\s{0,20}\)\s{0,20}\.exec\s{0,20}\(',
        V.INJECTION, Severity.HIGH,
        "Runtime.exec runs an OS command.",
        cwe='CWE-78',
        recommendation="Use ProcessBuilder with an argument list and validate input.",
        references=(OWASP_COMMAND,),
    ),
    _rule(
        r'''\b(?:executeQuery|executeUpdate|execute|prepareStatement)\s{0,20}\(\s{0,20}"[^"\n]{0,200}"\s{0,20}\+''',
        V.INJECTION, Severity.HIGH,
        "SQL statement built by string concatenation.",
        cwe='CWE-89',
        recommendation="Use PreparedStatement with bind parameters.",
        references=(OWASP_SQL,),
    ),
    _rule(
        r'\bnew\s{1,20}ObjectInputStream\s{0,20}\(',
        V.INSECURE_DESERIALIZATION, Severity.HIGH,
        "Java deserialization of untrusted streams can execute code.",
        cwe='CWE-502',
        recommendation="Avoid native serialization or use an ObjectInputFilter allow list.",
        references=(OWASP_DESERIAL,),
    ),
    _rule(
        r'\b(?:DocumentBuilderFactory|SAXParserFactory|XMLInputFactory)\.newInstance\s{0,20}\(',
        V.XXE, Severity.MEDIUM,
        "XML parser created without disabling external entities.",
        cwe='CWE-611',
        recommendation="Disable DTDs and external entities on the factory.",
        references=(OWASP_XXE,),
    ),
    _rule(
        r'\bgetWriter\s{0,20}\(\s{0,20}\)\s{0,20}\.(?:print|println|write)\s{0,20}\([^)\n]{0,200}getParameter',
        V.XSS, Severity.HIGH,
        "Request parameter written straight to the response.",
        cwe='CWE-79',
        recommendation="Encode output with an HTML encoder before writing it.",
        references=(OWASP_XSS,),
    ),
    _rule(
        r'\bnew\s{1,20}File(?:InputStream|Reader)?\s{0,20}\([^)\n]{0,200}getParameter',
        V.BROKEN_ACCESS_CONTROL, Severity.HIGH,
        "File path built from a request parameter.",
        cwe='CWE-22',
        recommendation="Canonicalize the path and check it against an allowed base directory.",
        references=(OWASP_PATH,),
    ),
    _rule(
        r'''\bMessageDigest\.getInstance\s{0,20}\(\s{0,20}"(?:MD5|SHA-?1)"''',
        V.SENSITIVE_DATA_EXPOSURE, Severity.MEDIUM,
        "Weak hash algorithm (MD5/SHA-1).",
        cwe='CWE-328',
        recommendation="Use SHA-256 or better.",
        references=(OWASP_CRYPTO,),
    ),
    _rule(
        r'''\bCipher\.getInstance\s{0,20}\(\s{0,20}"(?:DES|DESede|RC4|[^"\n]{0,50}/ECB/)''',
        V.SENSITIVE_DATA_EXPOSURE, Severity.HIGH,
        "Weak cipher or ECB mode.",
        cwe='CWE-327',
        recommendation="Use AES/GCM/NoPadding.",
        references=(OWASP_CRYPTO,),
    ),
    _rule(
        r'\bnew\s{1,20}Random\s{0,20}\(',
        V.OTHER, Severity.LOW,
        "java.util.Random is not cryptographically secure.",
        cwe='CWE-338',
        recommendation="Use SecureRandom for security values.",
    ),
    _rule(
        r'\.printStackTrace\s{0,20}\(\s{0,20}\)',
        V.INSUFFICIENT_LOGGING, Severity.LOW,
        "Stack trace printed instead of logged.",
        cwe='CWE-209',
        recommendation="Log through a logging framework.",
    ),
    _rule(
        r'\bcatch\s{0,20}\([^)\n]{0,200}\)\s{0,20}\{\s{0,20}\}',
        V.INSUFFICIENT_LOGGING, Severity.LOW,
        "Empty catch block swallows errors.",
        cwe='CWE-390',
        recommendation="Log or rethrow the exception.",
    ),
)


# ---------------------------------------------------------------------------
# Go
# ---------------------------------------------------------------------------

_GO_RULES = (
    _rule(
        r'''\bexec\.Command\s{0,20}\(\s{0,20}"(?:sh|bash|cmd)"''',
        V.INJECTION, Severity.HIGH,
        "Command run through a shell.",
        cwe='CWE-78',
        recommendation="Call the program directly with separate arguments.",
        references=(OWASP_COMMAND,),
    ),
    _rule(
        r'''\b(?:Query|QueryRow|Exec)(?:Context)?\s{0,20}\([^)\n]{0,200}(?:fmt\.Sprintf\s{0,20}\(|"\s{0,20}\+)''',
        V.INJECTION, Severity.HIGH,
        "SQL statement built with Sprintf or concatenation.",
        cwe='CWE-89',
        recommendation="Use placeholders and pass values as query arguments.",
        references=(OWASP_SQL,),
    ),
    _rule(
        r'\bInsecureSkipVerify\s{0,20}:\s{0,20}true\b',
        V.SECURITY_MISCONFIGURATION, Severity.HIGH,
        "TLS certificate verification disabled.",
        cwe='CWE-295',
        recommendation="Remove InsecureSkipVerify; configure RootCAs instead.",
    ),
    _rule(
        r'\btemplate\.HTML\s{0,20}\(',
        V.XSS, Severity.MEDIUM,
        "template.HTML marks content as safe and skips escaping.",
        cwe='CWE-79',
        recommendation="Let html/template escape values.",
        references=(OWASP_XSS,),
    ),
    _rule(
        r'\bos\.(?:Open|OpenFile|ReadFile)\s{0,20}\([^)\n]{0,200}\br\.(?:URL|Form|FormValue)',
        V.BROKEN_ACCESS_CONTROL, Severity.HIGH,
        "File path taken from the request.",
        cwe='CWE-22',
        recommendation="Clean the path with filepath.Clean and confine it to a base directory.",
        references=(OWASP_PATH,),
    ),
    _rule(
        r'''"math/rand"''',
        V.OTHER, Severity.LOW,
        "math/rand is not cryptographically secure.",
        cwe='CWE-338',
        recommendation="Use crypto/rand for security values.",
    ),
    _rule(
        r'\b(?:md5|sha1)\.(?:New|Sum)\s{0,20}\(',
        V.SENSITIVE_DATA_EXPOSURE, Severity.MEDIUM,
        "Weak hash algorithm (MD5/SHA-1).",
        cwe='CWE-328',
        recommendation="Use crypto/sha256.",
        references=(OWASP_CRYPTO,),
    ),
    _rule(
        r'\bif\s{1,20}err\s{0,20}!=\s{0,20}nil\s{0,20}\{\s{0,20}\}',
        V.INSUFFICIENT_LOGGING, Severity.LOW,
        "Error checked but ignored.",
        cwe='CWE-390',
        recommendation="Handle, wrap or log the error.",
    ),
)


# ---------------------------------------------------------------------------
# C / C++
# ---------------------------------------------------------------------------

_C_RULES = (
    _rule(
        r'\bgets\s{0,20}\(',
        V.OTHER, Severity.CRITICAL,
        "gets() cannot bound its input (buffer overflow).",
        cwe='CWE-242',
        recommendation="Use fgets with the buffer size.",
    ),
    _rule(
        r'\b(?:strcpy|strcat|sprintf|vsprintf)\s{0,20}\(',
        V.OTHER, Severity.HIGH,
        "Unbounded string copy can overflow the destination buffer.",
        cwe='CWE-120',
        recommendation="Use bounded variants such as strncpy, strncat or snprintf.",
    ),
    _rule(
        r'''\bscanf\s{0,20}\(\s{0,20}"[^"\n]{0,200}%s''',
        V.OTHER, Severity.HIGH,
        "scanf %s without a width can overflow the buffer.",
        cwe='CWE-120',
        recommendation="Give %s a maximum field width.",
    ),
    _rule(
        r'\b(?:system|popen)\s{0,20}\(',
        V.INJECTION, Severity.HIGH,
        "Shell command execution.",
        cwe='CWE-78',
        recommendation="Use an exec-family call with a fixed argument vector.",
        references=(OWASP_COMMAND,),
    ),
    _rule(
        r'\b(?:printf|fprintf\s{0,20}\(\s{0,20}\w+\s{0,20},)\s{0,20}\(?\s{0,20}[A-Za-z_]\w*\s{0,20}\)',
        V.INJECTION, Severity.MEDIUM,
        "Format string taken from a variable.",
        cwe='CWE-134',
        recommendation='Use a literal format such as printf("%s", value).',
    ),
    _rule(
        r'\b(?:rand|srand)\s{0,20}\(',
        V.OTHER, Severity.LOW,
        "rand() is not cryptographically secure.",
        cwe='CWE-338',
        recommendation="Use the platform CSPRNG for security values.",
    ),
    _rule(
        r'\bMD5(?:_Init|_Update|_Final)?\s{0,20}\(',
        V.SENSITIVE_DATA_EXPOSURE, Severity.MEDIUM,
        "Weak hash algorithm (MD5).",
        cwe='CWE-328',
        recommendation="Use SHA-256 or better.",
        references=(OWASP_CRYPTO,),
    ),
)


# ---------------------------------------------------------------------------
# C#
# ---------------------------------------------------------------------------

_CSHARP_RULES = (
    _rule(
        r'\bProcess\.Start\s{0,20}\(',
        V.INJECTION, Severity.HIGH,
        "Process.Start may run attacker-controlled commands.",
        cwe='CWE-78',
        recommendation="Validate arguments and avoid running through cmd.exe.",
        references=(OWASP_COMMAND,),
    ),
    _rule(
        r'''\bnew\s{1,20}SqlCommand\s{0,20}\(\s{0,20}(?:\$"|"[^"\n]{0,200}"\s{0,20}\+)''',
        V.INJECTION, Severity.HIGH,
        "SQL command built by concatenation or interpolation.",
        cwe='CWE-89',
        recommendation="Use SqlParameter for every value.",
        references=(OWASP_SQL,),
    ),
    _rule(
        r'\b(?:BinaryFormatter|NetDataContractSerializer|LosFormatter)\b',
        V.INSECURE_DESERIALIZATION, Severity.HIGH,
        "Insecure .NET serializer.",
        cwe='CWE-502',
        recommendation="Use System.Text.Json or another data-only serializer.",
        references=(OWASP_DESERIAL,),
    ),
    _rule(
        r'\bHtml\.Raw\s{0,20}\(',
        V.XSS, Severity.MEDIUM,
        "Html.Raw outputs unencoded HTML.",
        cwe='CWE-79',
        recommendation="Let Razor encode the value.",
        references=(OWASP_XSS,),
    ),
    _rule(
        r'\bDtdProcessing\s{0,20}=\s{0,20}DtdProcessing\.Parse\b',
        V.XXE, Severity.HIGH,
        "DTD processing enabled on an XML reader.",
        cwe='CWE-611',
        recommendation="Set DtdProcessing to Prohibit.",
        references=(OWASP_XXE,),
    ),
    _rule(
        r'\bServerCertificateValidationCallback\s{0,20}(?:\+=|=)[^;\n]{0,200}=>\s{0,20}true\b',
        V.SECURITY_MISCONFIGURATION, Severity.HIGH,
        "TLS certificate validation bypassed.",
        cwe='CWE-295',
        recommendation="Remove the callback or validate the chain properly.",
    ),
    _rule(
        r'\bFile\.\w+\s{0,20}\([^)\n]{0,200}\bRequest\.',
        V.BROKEN_ACCESS_CONTROL, Severity.HIGH,
        "File path taken from the request.",
        cwe='CWE-22',
        recommendation="Use Path.GetFullPath and check the result against a base directory.",
        references=(OWASP_PATH,),
    ),
    _rule(
        r'\bnew\s{1,20}Random\s{0,20}\(',
        V.OTHER, Severity.LOW,
        "System.Random is not cryptographically secure.",
        cwe='CWE-338',
        recommendation="Use RandomNumberGenerator for security values.",
    ),
    _rule(
        r'\b(?:DES|TripleDES|RC2)\.Create\s{0,20}\(|\bnew\s{1,20}(?:DES|TripleDES)CryptoServiceProvider\b',
        V.SENSITIVE_DATA_EXPOSURE, Severity.HIGH,
        "Weak symmetric cipher.",
        cwe='CWE-327',
        recommendation="Use Aes with GCM.",
        references=(OWASP_CRYPTO,),
    ),
    _rule(
        r'\b(?:MD5|SHA1)\.Create\s{0,20}\(|\bnew\s{1,20}(?:MD5|SHA1)CryptoServiceProvider\b',
        V.SENSITIVE_DATA_EXPOSURE, Severity.MEDIUM,
        "Weak hash algorithm (MD5/SHA-1).",
        cwe='CWE-328',
        recommendation="Use SHA256.",
        references=(OWASP_CRYPTO,),
    ),
)


RULES: Mapping[LanguageDialect, tuple[SecurityRule, ...]] = {
    LanguageDialect.JAVASCRIPT: _COMMON_RULES + _JS_RULES,
    LanguageDialect.TYPESCRIPT: _COMMON_RULES + _JS_RULES,
    LanguageDialect.PYTHON: _COMMON_RULES + _PYTHON_RULES,
    LanguageDialect.JAVA: _COMMON_RULES + _JAVA_RULES,
    LanguageDialect.GO: _COMMON_RULES + _GO_RULES,
    LanguageDialect.C: _COMMON_RULES + _C_RULES,
    LanguageDialect.CPP: _COMMON_RULES + _C_RULES,
    LanguageDialect.CSHARP: _COMMON_RULES + _CSHARP_RULES,
}

_missing = set(LanguageDialect) - set(RULES)
if _missing:
    raise RuntimeError(f"No security rules for: {sorted(d.value for d in _missing)}")


# Keyword lists for the estimator-driven keyword-proximity pass
KEYWORDS: Mapping[V, tuple[str, ...]] = {
    V.INJECTION: ('exec', 'eval', 'spawn', 'subprocess', 'shell'),
    V.XSS: ('innerHTML', 'document.write', 'innerText', 'dangerouslySetInnerHTML'),
    V.BROKEN_ACCESS_CONTROL: ('../', 'file://', 'readFile', 'writeFile', 'fs.'),
    V.SENSITIVE_DATA_EXPOSURE: ('password', 'token', 'secret', 'key', 'credential'),
    V.BROKEN_AUTHENTICATION: ('auth', 'login', 'password', 'session'),
    V.SECURITY_MISCONFIGURATION: ('config', 'setting', 'debug', 'dev'),
    V.XXE: ('parseXml', 'DOMParser', 'SAXParser'),
    V.INSECURE_DESERIALIZATION: ('deserialize', 'unserialize', 'JSON.parse'),
    V.VULNERABLE_COMPONENTS: ('import', 'require', 'load'),
    V.INSUFFICIENT_LOGGING: ('log', 'error', 'exception', 'catch'),
    V.OTHER: (),
}

ESTIMATED_MESSAGES: Mapping[V, str] = {
    V.INJECTION: "Possible code injection.",
    V.XSS: "Possible cross-site scripting.",
    V.BROKEN_ACCESS_CONTROL: "Possible access control weakness.",
    V.SENSITIVE_DATA_EXPOSURE: "Possible sensitive data exposure.",
    V.BROKEN_AUTHENTICATION: "Possible authentication weakness.",
    V.SECURITY_MISCONFIGURATION: "Possible security misconfiguration.",
    V.XXE: "Possible XML external entity processing.",
    V.INSECURE_DESERIALIZATION: "Possible insecure deserialization.",
    V.VULNERABLE_COMPONENTS: "Possible use of a vulnerable component.",
    V.INSUFFICIENT_LOGGING: "Possibly insufficient logging and monitoring.",
    V.OTHER: "Possible security weakness.",
}

_GENERIC_RECOMMENDATION = (
    "Have the code reviewed for security and follow current security best practices."
)

# Per-category remediation for estimated findings, by dialect where it differs
_CATEGORY_RECOMMENDATIONS: Mapping[V, Mapping[str, str]] = {
    V.INJECTION: {
        'javascript': "Sanitize user input and avoid eval and exec.",
        'typescript': "Sanitize user input and avoid eval and exec.",
        'python': "Sanitize user input and take care with exec, eval and subprocess.",
        'default': "Never pass unvalidated input to interpreters or shells.",
    },
    V.XSS: {
        'javascript': "Escape user input; prefer textContent or sanitize with DOMPurify.",
        'typescript': "Escape user input; prefer textContent or sanitize with DOMPurify.",
        'python': "Rely on the template engine's escaping so input is never emitted raw.",
        'default': "Encode all output that includes user input.",
    },
    V.SENSITIVE_DATA_EXPOSURE: {
        'python': "Move secrets to environment variables or a config parser.",
        'default': "Keep secrets out of code; use environment variables or a secret manager.",
    },
    V.BROKEN_ACCESS_CONTROL: {
        'python': "Build paths with os.path.join and confine them to allowed directories.",
        'default': "Validate user-supplied paths and restrict access to allowed directories.",
    },
}


def category_recommendation(vtype: V, dialect: LanguageDialect) -> str:
    """Remediation text for an estimated finding."""
    by_language = _CATEGORY_RECOMMENDATIONS.get(vtype, {})
    return by_language.get(dialect.value) or by_language.get('default') or _GENERIC_RECOMMENDATION


def rules_for(dialect: LanguageDialect) -> tuple[SecurityRule, ...]:
    return RULES[dialect]
